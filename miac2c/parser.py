"""Parsing layer — tree-sitter grammars or the built-in Miac reader."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from abc import ABC, abstractmethod

from .errors import GrammarNotFoundError
from .reader import MiacReader
from . import constants

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory returning tree-sitter parsers.

    A grammar binding installed as ``tree_sitter_<language>`` (the layout
    ``tree-sitter generate`` produces) takes precedence; any other language
    is delegated to tree-sitter-language-pack.
    """

    def get_parser(self, language: str):
        module_name = constants.GRAMMAR_MODULE_PREFIX + language
        if importlib.util.find_spec(module_name) is not None:
            from tree_sitter import Language, Parser as TSParser

            logger.info("Loading tree-sitter grammar from %s", module_name)
            binding = importlib.import_module(module_name)
            return TSParser(Language(binding.language()))

        import tree_sitter_language_pack as tslp

        try:
            return tslp.get_parser(language)
        except Exception as exc:
            raise GrammarNotFoundError(language, str(exc)) from exc


class MiacParserFactory(ParserFactory):
    """Concrete factory returning the built-in Miac reader."""

    def get_parser(self, language: str):
        if language != constants.MIAC_LANGUAGE:
            raise ValueError(f"Built-in reader only supports Miac, not {language}")
        return MiacReader()


class Parser:
    """Thin wrapper around a parser factory."""

    def __init__(self, parser_factory: ParserFactory):
        self._factory = parser_factory

    def parse(self, source: str, language: str):
        parser = self._factory.get_parser(language)
        tree = parser.parse(source.encode("utf-8"))
        return tree
