"""Tests for the composable API functions in miac2c.api."""

from __future__ import annotations

import pytest

from miac2c.api import translate_file, translate_source, translate_tree
from miac2c.config import GeneratorConfig
from miac2c.errors import (
    GrammarNotFoundError,
    MiacSyntaxError,
    SourceFileError,
    TranslationError,
    UnsupportedNodeError,
)
from miac2c.parser import MiacParserFactory, Parser, TreeSitterParserFactory
from miac2c.reader import MiacReader

PROGRAM = """\
const limit: i32 = 3;

fn count(n: i32) -> i32 {
    let total: i32 = 0;
    while n < limit {
        total = total + n;
        n = n + 1;
    }
    return total;
}
"""

EXPECTED = (
    "const int limit = 3;\n"
    "int count(int n) {\n"
    "int total = 0;\n"
    "while (n < limit) {\n"
    "total = total + n;\n"
    "n = n + 1;\n"
    "}\n"
    "return total;\n"
    "}\n"
)


class TestTranslateSource:
    def test_full_program(self):
        assert translate_source(PROGRAM) == EXPECTED

    def test_strict_config_propagates(self):
        source = "fn f() -> i32 { g(); return 0; }"
        assert translate_source(source) == "int f() {\nreturn 0;\n}\n"
        with pytest.raises(UnsupportedNodeError):
            translate_source(source, GeneratorConfig(strict=True))

    def test_syntax_error_propagates(self):
        with pytest.raises(MiacSyntaxError):
            translate_source("fn broken(")


class TestTranslateTree:
    def test_translates_prebuilt_tree(self):
        tree = MiacReader().parse(PROGRAM.encode("utf-8"))
        assert translate_tree(tree, PROGRAM) == EXPECTED


class TestTranslateFile:
    def test_writes_output(self, tmp_path):
        src = tmp_path / "count.miac"
        out = tmp_path / "count.c"
        src.write_text(PROGRAM, encoding="utf-8")
        result = translate_file(src, out)
        assert result == EXPECTED
        assert out.read_text(encoding="utf-8") == EXPECTED

    def test_no_output_on_failure(self, tmp_path):
        src = tmp_path / "bad.miac"
        out = tmp_path / "bad.c"
        src.write_text("fn f() -> i32 { g(); return 0; }", encoding="utf-8")
        with pytest.raises(UnsupportedNodeError):
            translate_file(src, out, GeneratorConfig(strict=True))
        assert not out.exists()


class TestParserFactories:
    def test_miac_factory_returns_reader(self):
        assert isinstance(MiacParserFactory().get_parser("miac"), MiacReader)

    def test_miac_factory_rejects_other_languages(self):
        with pytest.raises(ValueError):
            MiacParserFactory().get_parser("python")

    def test_tree_sitter_factory_uses_language_pack(self):
        tree = Parser(TreeSitterParserFactory()).parse("x = 1\n", "python")
        assert tree.root_node.type == "module"


class TestFailureBoundaries:
    def test_excessive_nesting_is_a_translation_error(self):
        source = "let x: i32 = " + "(" * 5000 + "1" + ")" * 5000 + ";"
        with pytest.raises(TranslationError):
            translate_source(source)

    def test_deep_but_reasonable_nesting_translates(self):
        value = "(" * 150 + "1" + ")" * 150
        assert translate_source(f"const x: i32 = {value};") == f"const int x = {value};\n"

    def test_non_utf8_input(self, tmp_path):
        src = tmp_path / "latin1.miac"
        src.write_bytes(b'let s: string = "caf\xe9";\n')
        with pytest.raises(SourceFileError) as exc_info:
            translate_file(src, tmp_path / "latin1.c")
        assert exc_info.value.path == str(src)

    def test_missing_input(self, tmp_path):
        with pytest.raises(SourceFileError):
            translate_file(tmp_path / "absent.miac", tmp_path / "absent.c")

    def test_unknown_grammar(self):
        with pytest.raises(GrammarNotFoundError) as exc_info:
            TreeSitterParserFactory().get_parser("no_such_grammar_xyz")
        assert exc_info.value.language == "no_such_grammar_xyz"
