# lexer.py
# Character-level JSON tokenizer.
#
# One forward pass over the text, one branch per character class. Tokens
# keep the absolute offset of their first character so the parser can point
# at the offending construct when it rejects a document.

import enum
import math
from typing import List, NamedTuple, Union

from json_errors import LexError, LexErrorKind

# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class TokenKind(enum.Enum):
    LBRACE   = "{"
    RBRACE   = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON    = ":"
    COMMA    = ","
    STRING   = "string"
    NUMBER   = "number"
    BOOLEAN  = "boolean"
    NULL     = "null"


class Token(NamedTuple):
    """
    Immutable token record: (kind, value, offset).

    `value` is the decoded literal for STRING, NUMBER and BOOLEAN tokens and
    None for punctuation and NULL.
    """
    kind: TokenKind
    value: Union[str, float, bool, None]
    offset: int

    def describe(self) -> str:
        if self.kind is TokenKind.STRING:
            return f"string {self.value!r}"
        if self.kind is TokenKind.NUMBER:
            return f"number {self.value!r}"
        if self.kind is TokenKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind is TokenKind.NULL:
            return "null"
        return f"'{self.kind.value}'"

# ---------------------------------------------------------------------------
# CHARACTER CLASSES
# ---------------------------------------------------------------------------
_STRUCTURAL = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}
_KEYWORDS = {
    "t": ("true", TokenKind.BOOLEAN, True),
    "f": ("false", TokenKind.BOOLEAN, False),
    "n": ("null", TokenKind.NULL, None),
}
_DIGITS      = "0123456789"
_NUMBER_BODY = _DIGITS + ".-"
_HEX_DIGITS  = "0123456789abcdefABCDEF"
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# ---------------------------------------------------------------------------
# LITERAL SCANNERS
# ---------------------------------------------------------------------------
def _is_number_text(text: str) -> bool:
    """Match -?digit+(.digit+)? without a regex."""
    body = text[1:] if text.startswith("-") else text
    whole, dot, frac = body.partition(".")
    if not whole or any(c not in _DIGITS for c in whole):
        return False
    if dot and (not frac or any(c not in _DIGITS for c in frac)):
        return False
    return True


def _scan_number(text: str, start: int):
    pos = start
    n = len(text)
    while pos < n and text[pos] in _NUMBER_BODY:
        pos += 1
    raw = text[start:pos]
    if not _is_number_text(raw):
        raise LexError(LexErrorKind.INVALID_NUMBER_LITERAL,
                       f"invalid number literal {raw!r} at offset {start}", start)
    value = float(raw)
    if not math.isfinite(value):
        raise LexError(LexErrorKind.INVALID_NUMBER_LITERAL,
                       f"number literal out of range at offset {start}", start)
    return value, pos


def _read_hex4(text: str, pos: int, escape_start: int) -> int:
    hexpart = text[pos:pos + 4]
    if len(hexpart) < 4:
        raise LexError(LexErrorKind.INVALID_ESCAPE,
                       f"short unicode escape at offset {escape_start}", escape_start)
    if not all(c in _HEX_DIGITS for c in hexpart):
        raise LexError(LexErrorKind.INVALID_ESCAPE,
                       f"invalid hex escape \\u{hexpart} at offset {escape_start}",
                       escape_start)
    return int(hexpart, 16)


def _scan_string(text: str, start: int):
    """
    Decode a string literal whose opening quote sits at `start`.

    Returns the decoded text and the offset just past the closing quote.
    A \\u high surrogate must be followed by a \\u low surrogate; the pair is
    combined into one code point. Lone surrogates are rejected.
    """
    out: List[str] = []
    pos = start + 1
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch == '"':
            return "".join(out), pos + 1
        if ch == "\\":
            if pos + 1 >= n:
                break
            esc = text[pos + 1]
            if esc in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[esc])
                pos += 2
                continue
            if esc != "u":
                raise LexError(LexErrorKind.INVALID_ESCAPE,
                               f"invalid escape \\{esc} at offset {pos}", pos)
            code = _read_hex4(text, pos + 2, pos)
            if 0xDC00 <= code <= 0xDFFF:
                raise LexError(LexErrorKind.INVALID_ESCAPE,
                               f"unpaired surrogate in string at offset {pos}", pos)
            if 0xD800 <= code <= 0xDBFF:
                if text[pos + 6:pos + 8] != "\\u":
                    raise LexError(LexErrorKind.INVALID_ESCAPE,
                                   f"unpaired surrogate in string at offset {pos}", pos)
                low = _read_hex4(text, pos + 8, pos + 6)
                if not 0xDC00 <= low <= 0xDFFF:
                    raise LexError(LexErrorKind.INVALID_ESCAPE,
                                   f"unpaired surrogate in string at offset {pos}", pos)
                code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                pos += 12
            else:
                pos += 6
            out.append(chr(code))
            continue
        if ch < " ":
            raise LexError(LexErrorKind.UNEXPECTED_CHARACTER,
                           f"unescaped control character {ch!r} in string at offset {pos}",
                           pos)
        out.append(ch)
        pos += 1
    raise LexError(LexErrorKind.UNTERMINATED_STRING,
                   f"unterminated string starting at offset {start}", start)


def _scan_keyword(text: str, start: int):
    word, kind, value = _KEYWORDS[text[start]]
    if text[start:start + len(word)] != word:
        raise LexError(LexErrorKind.INVALID_KEYWORD_LITERAL,
                       f"invalid literal at offset {start} - expected {word!r}", start)
    return kind, value, start + len(word)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def tokenize(text: str) -> List[Token]:
    """
    Split `text` into tokens. The whole list is built before parsing starts.

    No end-of-input token is appended; the parser bounds-checks instead.
    """
    tokens: List[Token] = []
    pos = 0
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch.isspace():
            pos += 1
        elif ch in _STRUCTURAL:
            tokens.append(Token(_STRUCTURAL[ch], None, pos))
            pos += 1
        elif ch == '"':
            value, end = _scan_string(text, pos)
            tokens.append(Token(TokenKind.STRING, value, pos))
            pos = end
        elif ch == "-" or ch in _DIGITS:
            value, end = _scan_number(text, pos)
            tokens.append(Token(TokenKind.NUMBER, value, pos))
            pos = end
        elif ch in _KEYWORDS:
            kind, value, end = _scan_keyword(text, pos)
            tokens.append(Token(kind, value, pos))
            pos = end
        else:
            raise LexError(LexErrorKind.UNEXPECTED_CHARACTER,
                           f"unexpected character {ch!r} at offset {pos}", pos)
    return tokens


__all__ = ["Token", "TokenKind", "tokenize"]
