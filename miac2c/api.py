"""Composable API functions for the Miac to C pipeline.

Each function corresponds to a stage of the CLI workflow but is callable
programmatically without argparse.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .codegen import CCodeGenerator
from .config import GeneratorConfig
from .errors import NestingTooDeepError, SourceFileError
from .parser import MiacParserFactory, Parser, ParserFactory, TreeSitterParserFactory
from .syntax import source_location
from . import constants

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = GeneratorConfig()


def _parser_for(config: GeneratorConfig) -> tuple[ParserFactory, str]:
    if config.grammar:
        return TreeSitterParserFactory(), config.grammar
    return MiacParserFactory(), constants.MIAC_LANGUAGE


def translate_tree(tree, source: str, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    """Generate C from an already parsed tree.

    Args:
        tree: Any tree exposing ``root_node`` with the tree-sitter Node surface.
        source: The source text the tree was parsed from.
        config: Generator configuration.

    Returns:
        The complete C source text.
    """
    try:
        return CCodeGenerator(config).generate(tree, source.encode("utf-8"))
    except RecursionError:
        root = tree.root_node
        raise NestingTooDeepError(root.type, source_location(root)) from None


def translate_source(source: str, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    """Parse Miac source and translate it to C.

    Args:
        source: The Miac source text.
        config: Generator configuration; ``config.grammar`` selects a
            tree-sitter grammar instead of the built-in reader.

    Returns:
        The complete C source text.

    Raises:
        MiacSyntaxError: If the built-in reader rejects the source.
        TranslationError: If the tree violates the generator's contract.
        GrammarNotFoundError: If ``config.grammar`` names no loadable grammar.
    """
    factory, language = _parser_for(config)
    logger.info(
        "Translating %d bytes of source (%s, strict=%s)",
        len(source),
        config.grammar or "built-in reader",
        config.strict,
    )
    tree = Parser(factory).parse(source, language)
    return translate_tree(tree, source, config)


def translate_file(
    input_path: str | Path,
    output_path: str | Path,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> str:
    """Translate the Miac file at *input_path* and write C to *output_path*.

    The output file is only written once translation has succeeded.

    Returns:
        The C source text that was written.

    Raises:
        SourceFileError: If the input cannot be read or is not UTF-8.
    """
    try:
        source = Path(input_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFileError(str(input_path), str(exc)) from exc
    c_code = translate_source(source, config)
    Path(output_path).write_text(c_code, encoding="utf-8")
    logger.info("Wrote %d bytes of C to %s", len(c_code), output_path)
    return c_code
