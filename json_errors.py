# json_errors.py
# Error taxonomy shared by the lexer, the parser and the conversion layer.
#
# Malformed documents surface as SyntaxError subclasses so existing callers
# that catch SyntaxError keep working. Conversion failures are ValueErrors:
# the document was well-formed, its shape just does not fit the target type.

import enum
from typing import Any, Optional

# ---------------------------------------------------------------------------
# ERROR KINDS
# ---------------------------------------------------------------------------
class LexErrorKind(enum.Enum):
    UNEXPECTED_CHARACTER    = "unexpected character"
    INVALID_NUMBER_LITERAL  = "invalid number literal"
    INVALID_KEYWORD_LITERAL = "invalid keyword literal"
    INVALID_ESCAPE          = "invalid escape"
    UNTERMINATED_STRING     = "unterminated string"


class ParseErrorKind(enum.Enum):
    EMPTY_INPUT              = "empty input"
    UNEXPECTED_END_OF_INPUT  = "unexpected end of input"
    UNEXPECTED_TOKEN         = "unexpected token"
    EXPECTED_STRING_KEY      = "expected string key"
    EXPECTED_COLON           = "expected colon"
    EXPECTED_COMMA_OR_CLOSER = "expected comma or closer"
    TRAILING_TOKENS          = "trailing tokens"
    DEPTH_LIMIT_EXCEEDED     = "depth limit exceeded"
    DUPLICATE_KEY            = "duplicate key"


class ConversionErrorKind(enum.Enum):
    TYPE_MISMATCH    = "type mismatch"
    MISSING_FIELD    = "missing field"
    ARRAY_ELEMENT    = "array element"
    FIELD_ERROR      = "field error"
    UNSUPPORTED_TYPE = "unsupported type"

# ---------------------------------------------------------------------------
# SYNTAX ERRORS
# ---------------------------------------------------------------------------
class JsonSyntaxError(SyntaxError):
    """
    Base for every malformed-document failure.

    `position` is the absolute character offset into the source text, or
    None when the failure has no single location (empty input).
    """
    def __init__(self, kind, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.position = position

    def __str__(self) -> str:
        return self.msg


class LexError(JsonSyntaxError):
    """Raised by the lexer for text that cannot be split into tokens."""

    def __init__(self, kind: LexErrorKind, message: str, position: int):
        super().__init__(kind, message, position)


class ParseError(JsonSyntaxError):
    """Raised by the parser; carries the offending token when there is one."""

    def __init__(self, kind: ParseErrorKind, message: str,
                 position: Optional[int] = None, token: Any = None):
        super().__init__(kind, message, position)
        self.token = token

# ---------------------------------------------------------------------------
# CONVERSION ERRORS
# ---------------------------------------------------------------------------
class ConversionError(ValueError):
    """
    A well-formed tree that does not fit the requested target type.

    Nested failures are chained through `cause`: an ARRAY_ELEMENT error
    names the failing index, a FIELD_ERROR names the failing record field,
    and both wrap the error raised one level down. `path()` walks the chain
    to render the location of the innermost failure.
    """
    def __init__(self, kind: ConversionErrorKind, message: str, *,
                 expected: Optional[str] = None, found: Optional[str] = None,
                 field: Optional[str] = None, index: Optional[int] = None,
                 cause: Optional["ConversionError"] = None):
        super().__init__(message)
        self.kind = kind
        self.expected = expected
        self.found = found
        self.field = field
        self.index = index
        self.cause = cause

    @classmethod
    def type_mismatch(cls, expected: str, found: str) -> "ConversionError":
        return cls(ConversionErrorKind.TYPE_MISMATCH,
                   f"expected {expected}, found {found}",
                   expected=expected, found=found)

    @classmethod
    def missing_field(cls, field: str) -> "ConversionError":
        return cls(ConversionErrorKind.MISSING_FIELD,
                   f"missing required field '{field}'", field=field)

    @classmethod
    def array_element(cls, index: int, cause: "ConversionError") -> "ConversionError":
        return cls(ConversionErrorKind.ARRAY_ELEMENT,
                   f"array element {index}: {cause}", index=index, cause=cause)

    @classmethod
    def field_error(cls, field: str, cause: "ConversionError") -> "ConversionError":
        return cls(ConversionErrorKind.FIELD_ERROR,
                   f"field '{field}': {cause}", field=field, cause=cause)

    @classmethod
    def unsupported_type(cls, found: str) -> "ConversionError":
        return cls(ConversionErrorKind.UNSUPPORTED_TYPE,
                   f"cannot encode value of type {found}", found=found)

    def innermost(self) -> "ConversionError":
        err = self
        while err.cause is not None:
            err = err.cause
        return err

    def path(self) -> str:
        parts = []
        err = self
        while err is not None:
            if err.kind is ConversionErrorKind.ARRAY_ELEMENT:
                parts.append(f"[{err.index}]")
            elif err.kind is ConversionErrorKind.FIELD_ERROR:
                parts.append(f".{err.field}" if parts else err.field)
            elif err.kind is ConversionErrorKind.MISSING_FIELD:
                parts.append(f".{err.field}" if parts else err.field)
            err = err.cause
        return "".join(parts)
