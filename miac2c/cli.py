"""Command-line entry point: ``miac2c INPUT OUTPUT``."""

from __future__ import annotations

import argparse
import logging

from .api import translate_file
from .config import GeneratorConfig
from .errors import Miac2cError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="miac2c", description="Translate a Miac source file to C"
    )
    parser.add_argument("input", help="Miac source file to translate")
    parser.add_argument("output", help="Path of the C file to write")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unsupported types and statements instead of dropping them",
    )
    parser.add_argument(
        "--grammar",
        default="",
        help="Parse with a tree-sitter grammar (e.g. 'miac' for tree_sitter_miac)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log pipeline progress"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    config = GeneratorConfig(strict=args.strict, grammar=args.grammar)
    try:
        translate_file(args.input, args.output, config)
    except Miac2cError as exc:
        logger.error("%s: %s", args.input, exc)
        return 1
    return 0
