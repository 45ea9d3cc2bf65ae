# json_parser.py
# Recursive-descent JSON parser and command-line validator.
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A TOKEN LIST
# =============================================================================
#
# The lexer (lexer.py) turns the whole text into a token list up front; the
# parser walks that list with a single read cursor. JSON is LL(1), so one
# token of lookahead (peek) is enough to pick every production.
#
# No end-of-input token exists. peek() and consume() bounds-check the cursor
# and raise UNEXPECTED_END_OF_INPUT instead, so a truncated document can
# never index past the list.
#
# Arrays and objects recurse through parse_value. Nesting is bounded by
# max_depth so adversarial input fails with DEPTH_LIMIT_EXCEEDED long before
# the interpreter's recursion limit.
#
# Objects are kept as ordered pair lists (json_values.JsonObject). Duplicate
# keys are legal unless the caller opts into reject_duplicate_keys.
# =============================================================================

import argparse
import logging
import sys
from typing import List, Optional

from json_errors import JsonSyntaxError, ParseError, ParseErrorKind
from json_values import (
    JsonArray,
    JsonBoolean,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    to_python,
)
from json_writer import serialize
from lexer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 128   # Two frames per level stays well under sys.getrecursionlimit()

_LEAF_KINDS = (TokenKind.NULL, TokenKind.BOOLEAN, TokenKind.NUMBER, TokenKind.STRING)

# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------
class Parser:
    """
    Cursor over a token list.

    The cursor only moves forward, one token per consume(), and never passes
    len(tokens). A Parser is single-use: build one per document.
    """
    def __init__(self, tokens: List[Token], *, max_depth: int = DEPTH_LIMIT_DEFAULT,
                 reject_duplicate_keys: bool = False):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self.reject_duplicate_keys = reject_duplicate_keys
        self._depth = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def _end_of_input(self) -> ParseError:
        last = self.tokens[-1] if self.tokens else None
        position = last.offset if last is not None else None
        return ParseError(ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                          "unexpected end of input", position, last)

    def peek(self) -> Token:
        if self.pos >= len(self.tokens):
            raise self._end_of_input()
        return self.tokens[self.pos]

    def consume(self) -> Token:
        tok = self.peek()
        self.pos += 1
        return tok

    # -----------------------------------------------------------------------
    # PRODUCTIONS
    # -----------------------------------------------------------------------
    def parse_value(self) -> JsonValue:
        """Dispatch on the peeked token kind."""
        tok = self.peek()
        if tok.kind in _LEAF_KINDS:
            self.consume()
            if tok.kind is TokenKind.NULL:
                return JsonNull()
            if tok.kind is TokenKind.BOOLEAN:
                return JsonBoolean(tok.value)
            if tok.kind is TokenKind.NUMBER:
                return JsonNumber(tok.value)
            return JsonString(tok.value)
        if tok.kind is TokenKind.LBRACKET:
            return self.parse_array()
        if tok.kind is TokenKind.LBRACE:
            return self.parse_object()
        raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN,
                         f"unexpected token {tok.describe()} at offset {tok.offset} - value expected",
                         tok.offset, tok)

    def _enter(self, opener: Token) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise ParseError(ParseErrorKind.DEPTH_LIMIT_EXCEEDED,
                             f"depth limit {self.max_depth} exceeded at offset {opener.offset}",
                             opener.offset, opener)

    def _expect_comma_or(self, closer: TokenKind) -> bool:
        """Consume ',' (returns False) or the closer (returns True)."""
        tok = self.consume()
        if tok.kind is TokenKind.COMMA:
            return False
        if tok.kind is closer:
            return True
        raise ParseError(ParseErrorKind.EXPECTED_COMMA_OR_CLOSER,
                         f"unexpected token {tok.describe()} at offset {tok.offset}"
                         f" - expected ',' or '{closer.value}'",
                         tok.offset, tok)

    def parse_array(self) -> JsonArray:
        opener = self.consume()
        self._enter(opener)
        items: List[JsonValue] = []
        if self.peek().kind is TokenKind.RBRACKET:
            self.consume()
        else:
            while True:
                items.append(self.parse_value())
                if self._expect_comma_or(TokenKind.RBRACKET):
                    break
        self._depth -= 1
        return JsonArray(tuple(items))

    def parse_object(self) -> JsonObject:
        opener = self.consume()
        self._enter(opener)
        members = []
        seen = set()
        if self.peek().kind is TokenKind.RBRACE:
            self.consume()
        else:
            while True:
                key_tok = self.consume()
                if key_tok.kind is not TokenKind.STRING:
                    raise ParseError(ParseErrorKind.EXPECTED_STRING_KEY,
                                     f"unexpected token {key_tok.describe()} at offset"
                                     f" {key_tok.offset} - expected string key",
                                     key_tok.offset, key_tok)
                colon = self.consume()
                if colon.kind is not TokenKind.COLON:
                    raise ParseError(ParseErrorKind.EXPECTED_COLON,
                                     f"unexpected token {colon.describe()} at offset"
                                     f" {colon.offset} - expected ':'",
                                     colon.offset, colon)
                if self.reject_duplicate_keys:
                    if key_tok.value in seen:
                        raise ParseError(ParseErrorKind.DUPLICATE_KEY,
                                         f"duplicate key {key_tok.value!r} at offset {key_tok.offset}",
                                         key_tok.offset, key_tok)
                    seen.add(key_tok.value)
                members.append((key_tok.value, self.parse_value()))
                if self._expect_comma_or(TokenKind.RBRACE):
                    break
        self._depth -= 1
        return JsonObject(tuple(members))

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse_document(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT,
                   reject_duplicate_keys: bool = False) -> JsonValue:
    """
    Parse exactly one JSON value from `text`.

    Any token left after the root value is an error: "123 456" is two
    documents, not one.
    """
    tokens = tokenize(text)
    if not tokens:
        raise ParseError(ParseErrorKind.EMPTY_INPUT, "empty input")
    parser = Parser(tokens, max_depth=max_depth, reject_duplicate_keys=reject_duplicate_keys)
    result = parser.parse_value()
    if not parser.at_end():
        extra = parser.peek()
        raise ParseError(ParseErrorKind.TRAILING_TOKENS,
                         f"extra data after root value at offset {extra.offset}",
                         extra.offset, extra)
    logger.debug("parsed document: %d tokens, %d chars", len(tokens), len(text))
    return result


def parse(text: str, **kwargs):
    """Parse `text` straight into plain Python data (dict/list/str/float/bool/None)."""
    return to_python(parse_document(text, **kwargs))

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _cli(argv: List[str]) -> int:
    """
    Validate a JSON file.

    Exit code 0 on success, 1 on a syntax error, so the command slots into
    shell pipelines and build checks.
    """
    ap = argparse.ArgumentParser(description="JSON validator")
    ap.add_argument("file", help="JSON file to verify")
    ap.add_argument("--debug", action="store_true", help="dump token stream and exit")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("--reject-dup-keys", action="store_true",
                    help="fail on a key repeated within one object")
    ap.add_argument("--emit", action="store_true",
                    help="print the compact re-serialized document instead of OK")
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            data = fh.read()
    except UnicodeDecodeError as exc:
        print(f"SyntaxError: invalid UTF-8 at byte {exc.start} of {args.file}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: cannot read {args.file}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    logger.info("read %d chars from %s", len(data), args.file)

    try:
        if args.debug:
            for tok in tokenize(data):
                print(tok)
            return 0
        tree = parse_document(data, max_depth=args.max_depth,
                              reject_duplicate_keys=args.reject_dup_keys)
    except JsonSyntaxError as exc:
        print(f"SyntaxError: {exc}", file=sys.stderr)
        return 1

    print(serialize(tree) if args.emit else "OK")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return _cli(sys.argv[1:] if argv is None else argv)

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
