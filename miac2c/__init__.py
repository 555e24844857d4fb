"""Miac to C source translator."""

from .api import translate_file, translate_source, translate_tree  # noqa: F401
from .codegen import CCodeGenerator, lower_type  # noqa: F401
from .config import GeneratorConfig  # noqa: F401
