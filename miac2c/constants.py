"""Named constants — node kinds, field names and the type lowering table."""

from __future__ import annotations

MIAC_LANGUAGE = "miac"
GRAMMAR_MODULE_PREFIX = "tree_sitter_"

# Node kinds
PROGRAM = "program"
FUNCTION_DEFINITION = "function_definition"
VARIABLE_DECLARATION = "variable_declaration"
PARAMETER = "parameter"
PARAMETER_LIST = "parameter_list"
BLOCK = "block"
RETURN_STATEMENT = "return_statement"
ASSIGNMENT_STATEMENT = "assignment_statement"
WHILE_STATEMENT = "while_statement"
IF_STATEMENT = "if_statement"
EXPRESSION_STATEMENT = "expression_statement"
COMMENT = "comment"

# Miac primitive type name -> C spelling
C_TYPE_NAMES: dict[str, str] = {
    "i32": "int",
    "f32": "float",
    "string": "char *",
    "bool": "int",
}

CONST_QUALIFIER = "const"
