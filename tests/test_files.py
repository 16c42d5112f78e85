"""
Tests for reading batch upload files.
"""
import builtins

import pytest

from bulk_batch_client.core.batching import files
from bulk_batch_client.core.batching.models import ContentType
from bulk_batch_client.core.errors import FileReadError, InvalidFileTypeError


class TestCheckBatchFileType:

    @pytest.mark.parametrize("name, content_type", [
        ("records.xml", ContentType.XML),
        ("RECORDS.XML", ContentType.XML),
        ("records.csv", ContentType.CSV),
    ])
    def test_matching_extension(self, name, content_type):
        assert files.check_batch_file_type(name, content_type).name == name

    def test_mismatch_reports_expected_extension(self):
        with pytest.raises(InvalidFileTypeError) as exc_info:
            files.check_batch_file_type("records.csv", ContentType.XML)
        assert exc_info.value.expected_extension == ".xml"
        assert exc_info.value.path.name == "records.csv"


class TestReadBatchFile:

    def test_reads_whole_file(self, tmp_path):
        path = tmp_path / "records.csv"
        path.write_text("Name\nAcme\nGlobex\n", encoding="utf-8")

        assert files.read_batch_file(path, ContentType.CSV) == "Name\nAcme\nGlobex\n"

    def test_wrong_extension_never_opens_the_file(self, tmp_path, monkeypatch):
        opened = []
        monkeypatch.setattr(builtins, "open", lambda *args, **kwargs: opened.append(args))

        with pytest.raises(InvalidFileTypeError):
            files.read_batch_file(tmp_path / "records.txt", ContentType.XML)
        assert opened == []

    def test_missing_file(self, tmp_path):
        path = tmp_path / "missing.xml"

        with pytest.raises(FileReadError) as exc_info:
            files.read_batch_file(path)

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_undecodable_content(self, tmp_path):
        path = tmp_path / "records.xml"
        path.write_bytes(b"<sObjects>\xff\xfe</sObjects>")

        with pytest.raises(FileReadError) as exc_info:
            files.read_batch_file(path, encoding="utf-8")
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    def test_handle_closed_when_read_fails(self, tmp_path, monkeypatch):
        path = tmp_path / "records.xml"
        path.write_text("<sObjects/>", encoding="utf-8")
        handles = []
        real_open = builtins.open

        class FailingReader:
            def __init__(self, handle):
                self.handle = handle

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self.handle.close()

            def read(self):
                raise OSError("I/O error")

        def fake_open(*args, **kwargs):
            handle = real_open(*args, **kwargs)
            handles.append(handle)
            return FailingReader(handle)

        monkeypatch.setattr(builtins, "open", fake_open)

        with pytest.raises(FileReadError):
            files.read_batch_file(path)
        assert len(handles) == 1
        assert handles[0].closed

    def test_other_encoding(self, tmp_path):
        path = tmp_path / "records.csv"
        path.write_bytes("Name\nSociété\n".encode("latin-1"))

        content = files.read_batch_file(path, ContentType.CSV, encoding="latin-1")
        assert "Société" in content
