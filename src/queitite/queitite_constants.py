"""
Token tables for the Queitite language.

Maps every reserved word and operator lexeme to its canonical token type. The
lexer uses `token_hashmap` for longest-match recognition, and the parser uses
the grouped type tuples to drive its precedence tiers and error recovery.
"""

KEYWORDS: dict[str, str] = {
    "fn": "FN",
    "if": "IF",
    "else": "ELSE",
    "for": "FOR",
    "while": "WHILE",
    "do": "DO",
    "end": "END",
    "print": "PRINT",
    "return": "RETURN",
    "and": "AND",
    "or": "OR",
    "true": "TRUE",
    "false": "FALSE",
    "nil": "NIL",
}

OPERATORS: dict[str, str] = {
    "=": "ASSIGN",
    "==": "EQ",
    "!=": "NE",
    ">": "GT",
    ">=": "GE",
    "<": "LT",
    "<=": "LE",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "**": "POW",
    "??": "COALESCE",
    "!": "BANG",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
}

token_hashmap: dict[str, str] = {**KEYWORDS, **OPERATORS}

# Non-lexeme token types
IDENT = "IDENT"
NUMBER = "NUMBER"
STRING = "STRING"
EOL = "EOL"
EOF = "EOF"
ERROR = "ERROR"

# Parser tiers
EQUALITY_OPS: tuple[str, ...] = ("EQ", "NE")
COMPARISON_OPS: tuple[str, ...] = ("GT", "GE", "LT", "LE")
TERM_OPS: tuple[str, ...] = ("PLUS", "MINUS")
FACTOR_OPS: tuple[str, ...] = ("SLASH", "STAR", "POW", "COALESCE")
UNARY_OPS: tuple[str, ...] = ("BANG", "MINUS")

# Tokens that start a statement; synchronization stops in front of these.
STATEMENT_KEYWORDS: tuple[str, ...] = (
    "FN",
    "IF",
    "FOR",
    "PRINT",
    "RETURN",
    "WHILE",
    "DO",
)

# Tokens that close a simple statement without being consumed by it.
STATEMENT_CLOSERS: tuple[str, ...] = (EOF, "END", "ELSE")

__all__ = [
    "COMPARISON_OPS",
    "EOF",
    "EOL",
    "EQUALITY_OPS",
    "ERROR",
    "FACTOR_OPS",
    "IDENT",
    "KEYWORDS",
    "NUMBER",
    "OPERATORS",
    "STATEMENT_CLOSERS",
    "STATEMENT_KEYWORDS",
    "STRING",
    "TERM_OPS",
    "UNARY_OPS",
    "token_hashmap",
]
