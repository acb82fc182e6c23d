import pytest

from mdictkit.errors import InvalidDataFormatError, UserInterruptedError
from mdictkit.mdict_source import MDictSourceLoader

SAMPLE = "apple\n<b>Apple</b>\n</>\nbanana\nyellow fruit\n</>\n"


def _write(tmp_path, data):
    path = tmp_path / "source.txt"
    path.write_bytes(data if isinstance(data, bytes) else data.encode("utf-8"))
    return path


def test_scan_records(tmp_path):
    path = _write(tmp_path, SAMPLE)
    with MDictSourceLoader(path) as loader:
        keys = [r.key for r in loader.records]
        assert keys == ["apple", "banana"]
        first, second = loader.records
        assert first.position == len("apple\n")
        assert first.content_len == len("<b>Apple</b>\n</>\n")
        assert first.line_no == 3
        assert second.line_no == 6
        assert second.position == len("apple\n<b>Apple</b>\n</>\nbanana\n")


def test_load_data(tmp_path):
    path = _write(tmp_path, SAMPLE)
    with MDictSourceLoader(path) as loader:
        assert loader.load_data(loader.records[1]) == b"yellow fruit\n</>\n"
        assert loader.load_data(loader.records[0]) == b"<b>Apple</b>\n</>\n"


def test_bom_is_skipped(tmp_path):
    path = _write(tmp_path, b"\xef\xbb\xbf" + SAMPLE.encode("utf-8"))
    with MDictSourceLoader(path) as loader:
        assert loader.records[0].key == "apple"


def test_crlf_keys(tmp_path):
    path = _write(tmp_path, "apple\r\ntext\r\n</>\r\n")
    with MDictSourceLoader(path) as loader:
        assert [r.key for r in loader.records] == ["apple"]
        assert loader.load_data(loader.records[0]) == b"text\r\n</>\r\n"


def test_empty_file(tmp_path):
    path = _write(tmp_path, b"")
    with MDictSourceLoader(path) as loader:
        assert loader.records == []


def test_trailing_blank_line_accepted(tmp_path):
    path = _write(tmp_path, SAMPLE + "\n")
    with MDictSourceLoader(path) as loader:
        assert len(loader.records) == 2


def test_blank_key_in_middle_rejected(tmp_path):
    path = _write(tmp_path, "apple\ntext\n</>\n\nbanana\nx\n</>\n")
    with pytest.raises(InvalidDataFormatError, match="Invalid key"):
        MDictSourceLoader(path)


def test_key_too_long(tmp_path):
    path = _write(tmp_path, "k" * 256 + "\ntext\n</>\n")
    with pytest.raises(InvalidDataFormatError, match="Key too long"):
        MDictSourceLoader(path)


def test_key_at_limit_accepted(tmp_path):
    path = _write(tmp_path, "k" * 255 + "\ntext\n</>\n")
    with MDictSourceLoader(path) as loader:
        assert loader.records[0].key == "k" * 255


def test_entry_without_terminator(tmp_path):
    path = _write(tmp_path, "apple\nline one\nline two")
    with MDictSourceLoader(path) as loader:
        assert loader.load_data(loader.records[0]) == b"line one\nline two"


def test_invalid_utf8(tmp_path):
    path = _write(tmp_path, b"app\xffle\ntext\n</>\n")
    with pytest.raises(InvalidDataFormatError):
        MDictSourceLoader(path)


def test_progress_reports_positions(tmp_path):
    path = _write(tmp_path, SAMPLE)
    calls = []

    def progress(current, total):
        calls.append((current, total))
        return False

    with MDictSourceLoader(path, progress) as loader:
        assert len(calls) == len(loader.records)
    size = len(SAMPLE.encode("utf-8"))
    assert calls[-1] == (size, size)
    assert calls[0][0] < calls[1][0]


def test_progress_cancel(tmp_path):
    path = _write(tmp_path, SAMPLE)
    with pytest.raises(UserInterruptedError):
        MDictSourceLoader(path, lambda current, total: True)


def test_close(tmp_path):
    path = _write(tmp_path, SAMPLE)
    loader = MDictSourceLoader(path)
    loader.close()
    with pytest.raises(ValueError):
        loader.load_data(loader.records[0])