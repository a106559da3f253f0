"""Tests for the unhtml command line."""

import io
import sys

import pytest

from unhtml.cli import main


def _stdin(monkeypatch, data: bytes):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


class TestStdin:
    def test_converts_stdin_to_stdout(self, monkeypatch, capsys, tmp_path):
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, b"<p>Hello <a href='http://x'>there</a></p>")
        main([])
        assert capsys.readouterr().out == "Hello there (http://x)"

    def test_plain_text_unchanged(self, monkeypatch, capsys, tmp_path):
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, b"no markup here\n")
        main([])
        assert capsys.readouterr().out == "no markup here"

    def test_decode_failure_reported(self, monkeypatch, capsys, tmp_path):
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, b"bad \xff byte")
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        assert "Error converting <stdin>" in capsys.readouterr().err

    def test_output_is_utf8_under_ascii_stdout(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, "<p>café</p>".encode("utf-8"))
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="ascii"))
        main([])
        assert raw.getvalue() == "café".encode("utf-8")

    def test_errors_option_overrides_strict(self, monkeypatch, capsys, tmp_path):
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, b"bad \xff byte")
        main(["--errors", "replace"])
        assert capsys.readouterr().out == "bad � byte"

    def test_config_file_in_cwd(self, monkeypatch, capsys, tmp_path):
        (tmp_path / ".unhtml.toml").write_text('encoding = "latin-1"\n')
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, "café".encode("latin-1"))
        main([])
        assert capsys.readouterr().out == "café"

    def test_no_config_ignores_file(self, monkeypatch, capsys, tmp_path):
        (tmp_path / ".unhtml.toml").write_text('encoding = "latin-1"\n')
        monkeypatch.chdir(tmp_path)
        _stdin(monkeypatch, "café".encode("utf-8"))
        main(["--no-config"])
        assert capsys.readouterr().out == "café"

    def test_bad_config_exits(self, monkeypatch, capsys, tmp_path):
        (tmp_path / ".unhtml.toml").write_text("chunk_size = -5\n")
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1
        assert "Error loading config" in capsys.readouterr().err


class TestFiles:
    def test_files_written_as_utf8_under_ascii_stdout(self, tmp_path, monkeypatch):
        first = tmp_path / "a.html"
        first.write_text("<b>naïve</b>", encoding="utf-8")
        second = tmp_path / "b.html"
        second.write_text("<i>ok</i>", encoding="utf-8")
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="ascii"))
        main(["--no-config", str(first), str(second)])
        assert raw.getvalue() == "naïve\nok\n".encode("utf-8")

    def test_single_file_to_stdout(self, tmp_path, capsys):
        path = tmp_path / "msg.html"
        path.write_text("<ul><li>one<li>two</ul>", encoding="utf-8")
        main(["--no-config", str(path)])
        assert capsys.readouterr().out == "* one\n* two\n\n"

    def test_output_dir(self, tmp_path):
        src = tmp_path / "page.html"
        src.write_text("<h1>Title</h1><p>Body</p>", encoding="utf-8")
        out_dir = tmp_path / "out"
        main(["--no-config", "--output-dir", str(out_dir), str(src)])
        assert (out_dir / "page.txt").read_text(encoding="utf-8") == "Title\n\nBody"

    def test_missing_file_fails_but_others_convert(self, tmp_path, capsys):
        good = tmp_path / "good.html"
        good.write_text("<b>fine</b>", encoding="utf-8")
        out_dir = tmp_path / "out"
        with pytest.raises(SystemExit) as excinfo:
            main([
                "--no-config", "--output-dir", str(out_dir),
                str(tmp_path / "missing.html"), str(good),
            ])
        assert excinfo.value.code == 1
        assert "file not found" in capsys.readouterr().err
        assert (out_dir / "good.txt").read_text(encoding="utf-8") == "fine"

    def test_unknown_encoding_exits(self, tmp_path, capsys):
        path = tmp_path / "a.html"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main(["--no-config", "--encoding", "no-such-codec", str(path)])
        assert excinfo.value.code == 1
        assert "no-such-codec" in capsys.readouterr().err

    def test_bad_chunk_size_rejected(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["--no-config", "--chunk-size", "0"])
        assert excinfo.value.code == 2
