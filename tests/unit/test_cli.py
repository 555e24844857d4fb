"""Tests for the miac2c command-line entry point."""

from __future__ import annotations

import pytest

from miac2c.cli import main


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "prog.miac"
    path.write_text("fn add(a: i32, b: i32) -> i32 { return a + b; }\n", encoding="utf-8")
    return path


class TestCli:
    def test_translates_file(self, source_file, tmp_path):
        out = tmp_path / "prog.c"
        assert main([str(source_file), str(out)]) == 0
        assert out.read_text(encoding="utf-8") == "int add(int a, int b) {\nreturn a + b;\n}\n"

    def test_syntax_error_exits_nonzero(self, tmp_path):
        src = tmp_path / "bad.miac"
        src.write_text("fn add(a: i32", encoding="utf-8")
        out = tmp_path / "bad.c"
        assert main([str(src), str(out)]) == 1
        assert not out.exists()

    def test_strict_flag(self, tmp_path):
        src = tmp_path / "loose.miac"
        src.write_text("let c: u8 = 1;\n", encoding="utf-8")
        out = tmp_path / "loose.c"
        assert main([str(src), str(out)]) == 0
        assert out.read_text(encoding="utf-8") == " c = 1;\n"
        out.unlink()
        assert main(["--strict", str(src), str(out)]) == 1
        assert not out.exists()

    def test_requires_two_paths(self, source_file):
        with pytest.raises(SystemExit):
            main([str(source_file)])

    def test_non_utf8_input_exits_nonzero(self, tmp_path):
        src = tmp_path / "latin1.miac"
        src.write_bytes(b'let s: string = "caf\xe9";\n')
        out = tmp_path / "latin1.c"
        assert main([str(src), str(out)]) == 1
        assert not out.exists()

    def test_unknown_grammar_exits_nonzero(self, source_file, tmp_path):
        out = tmp_path / "prog.c"
        assert main(["--grammar", "no_such_grammar_xyz", str(source_file), str(out)]) == 1
        assert not out.exists()

    def test_excessive_nesting_exits_nonzero(self, tmp_path):
        src = tmp_path / "deep.miac"
        src.write_text(
            "let x: i32 = " + "(" * 5000 + "1" + ")" * 5000 + ";\n", encoding="utf-8"
        )
        out = tmp_path / "deep.c"
        assert main([str(src), str(out)]) == 1
        assert not out.exists()
