[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdictkit"
version = "0.5.0"
description = "Ciphers, digests, a text-source loader and key-block writers for MDict-style dictionary databases"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mdict",
    "mdx",
    "mdd",
    "dictionary",
    "salsa20",
    "xxhash",
    "ripemd128",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mdictkit"]

[tool.hatch.build.targets.sdist]
include = ["mdictkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
