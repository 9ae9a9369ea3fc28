"""
Static configuration data for the ycalc expression engine.
This includes the character classes used by the lexer, keyword and operator
tables, the default constant environment and the integer limits.
"""

import math

# --- Lexer character classes ---

# An explicit set, not the Unicode White_Space property.
WHITESPACE_CHARS = frozenset(
    {
        "\u0009",  # \t
        "\u000a",  # \n
        "\u000b",  # vertical tab
        "\u000c",  # form feed
        "\u000d",  # \r
        " ",  # space
        "\u0085",  # NEXT LINE
        "\u200e",  # LEFT-TO-RIGHT MARK
        "\u200f",  # RIGHT-TO-LEFT MARK
        "\u2028",  # LINE SEPARATOR
        "\u2029",  # PARAGRAPH SEPARATOR
    }
)
DIGITS = frozenset("0123456789")
IDENTIFIER_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
IDENTIFIER_CONTINUE = IDENTIFIER_START | DIGITS
EXPONENT_MARKERS = frozenset("eE")

# --- Operator tables ---
# Values are Operator member names (see ycalc.classes.Operator).

# Characters that always form a token on their own.
SINGLE_CHAR_OPERATORS = {
    "+": "ADD",
    "-": "SUB",
    "~": "BNOT",
    "^": "BXOR",
    "%": "MOD",
}

# first char -> (operator when alone, {second char: operator for the pair}).
# A None "alone" entry means the first char is invalid on its own.
DOUBLE_CHAR_OPERATORS = {
    "!": ("LNOT", {"=": "NEQL"}),
    "|": ("BOR", {"|": "LOR"}),
    "&": ("BAND", {"&": "LAND"}),
    "*": ("MUL", {"*": "POW"}),
    "/": ("DIV", {"/": "INTDIV"}),
    "=": (None, {"=": "EQL"}),
    ">": ("GT", {"=": "GE", ">": "BIT_SHIFT_R"}),
    "<": ("LT", {"=": "LE", "<": "BIT_SHIFT_L"}),
}

# Identifier texts that are not identifiers. "as" is an operator.
KEYWORDS = {"as": "AS", "true": "TRUE", "false": "FALSE"}

# Human readable operator names used in type errors, e.g.
# "cannot apply operator `add` on types `integer` and `boolean`".
OPERATOR_DISPLAY_NAMES = {
    "ADD": "add",
    "SUB": "subtract",
    "MUL": "multiply",
    "DIV": "divide",
    "INTDIV": "integer divide",
    "MOD": "modulo",
    "POW": "power",
    "BIT_SHIFT_L": "left bitshift",
    "BIT_SHIFT_R": "right bitshift",
    "BAND": "bitwise and",
    "BOR": "bitwise or",
    "BXOR": "bitwise xor",
    "BNOT": "bitwise not",
    "LAND": "logical and",
    "LOR": "logical or",
    "LNOT": "logical not",
    "AS": "as",
    "EQL": "equal",
    "NEQL": "not equal",
    "LT": "less than",
    "LE": "less than or equal",
    "GT": "greater than",
    "GE": "greater than or equal",
}

# --- Cast targets ---
CAST_TARGET_FLOAT = "float"
CAST_TARGET_INT = "int"

# --- Numeric limits ---
INT128_MIN = -(2**127)
INT128_MAX = 2**127 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
UINT32_MAX = 2**32 - 1
INT_BITS = 128

# --- Default constant environment ---
DEFAULT_CONSTANTS = {
    "pi": math.pi,
    "tau": math.tau,
    "e": math.e,
    "sqrt2": math.sqrt(2.0),
}

# A mapping from the parser's token names to friendly, human-readable names.
FRIENDLY_TOKEN_NAMES = {
    "INTEGER": "an integer",
    "FLOAT": "a float",
    "IDENTIFIER": "a name",
    "TRUE": "'true'",
    "FALSE": "'false'",
    "LPAR": "an opening parenthesis '('",
    "RPAR": "a closing parenthesis ')'",
    "AS": "the 'as' operator",
    "ADD": "'+'",
    "SUB": "'-'",
    "MUL": "'*'",
    "DIV": "'/'",
    "INTDIV": "'//'",
    "MOD": "'%'",
    "POW": "'**'",
    "BIT_SHIFT_L": "'<<'",
    "BIT_SHIFT_R": "'>>'",
    "BAND": "'&'",
    "BOR": "'|'",
    "BXOR": "'^'",
    "BNOT": "'~'",
    "LAND": "'&&'",
    "LOR": "'||'",
    "LNOT": "'!'",
    "EQL": "'=='",
    "NEQL": "'!='",
    "LT": "'<'",
    "LE": "'<='",
    "GT": "'>'",
    "GE": "'>='",
    "$END": "the end of the input",
}
