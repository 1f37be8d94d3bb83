"""Character-level escaping for JavaScript string literals."""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

# https://mathiasbynens.be/notes/javascript-escapes#single
# `\v` is left out on purpose: old engines read '\v' as 'v'.
SINGLE_ESCAPES: Final = {
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Whitespace that minimal mode still escapes
PROBLEMATIC_WHITESPACE: Final = frozenset(
    "\xa0\u1680\u2028\u2029\u202f\u205f\u3000"
    + "".join(chr(cp) for cp in range(0x2000, 0x200B))
)

# Printable ASCII minus quotes and backslash
SAFE_ASCII: Final = frozenset(
    " !"
    + "".join(chr(cp) for cp in range(0x23, 0x27))
    + "".join(chr(cp) for cp in range(0x28, 0x5C))
    + "".join(chr(cp) for cp in range(0x5D, 0x60))
    + "".join(chr(cp) for cp in range(0x61, 0x7F))
)

QUOTE_CHARS: Final = frozenset("'\"`")

_HIGH_SURROGATES: Final = range(0xD800, 0xDC00)
_LOW_SURROGATES: Final = range(0xDC00, 0xE000)
_ASTRAL_START: Final = 0x10000

_TEMPLATE_INTERPOLATION = re.compile(r"\$\{")
_CLOSING_TAG = re.compile(r"</(script|style)", re.IGNORECASE)
_COMMENT_OPEN = re.compile(r"<!--")


class CharClass(Enum):
    """
    Escaping decision for a single code point.

    Members are listed in priority order; the first that applies wins.
    """

    LITERAL = "literal"
    SURROGATE_PAIR = "surrogate_pair"
    LONE_SURROGATE = "lone_surrogate"
    NUL = "nul"
    QUOTE = "quote"
    SINGLE_ESCAPE = "single_escape"
    HEX = "hex"


def _hexadecimal(code: int, lowercase: bool) -> str:
    digits = format(code, "x")
    return digits if lowercase else digits.upper()


def four_hex_escape(code: int, lowercase: bool) -> str:
    """Returns a `\\uXXXX` escape for a single UTF-16 code unit."""
    return "\\u" + _hexadecimal(code, lowercase).rjust(4, "0")[-4:]


def split_surrogates(code_point: int) -> tuple[int, int]:
    """Splits an astral code point into its UTF-16 high and low halves."""
    offset = code_point - _ASTRAL_START
    return 0xD800 + (offset >> 10), 0xDC00 + (offset & 0x3FF)


def classify_char(
    text: str,
    index: int,
    *,
    escape_everything: bool,
    json: bool,
) -> CharClass:
    """
    Classifies the code point at ``index`` for the escaping pass.

    Only the structural classes are decided here; options that affect the
    rendering of a class (``minimal``, ``es6``, the active quote) are applied
    by the caller.
    """
    char = text[index]
    if not escape_everything and char in SAFE_ASCII:
        return CharClass.LITERAL

    code = ord(char)
    if code >= _ASTRAL_START:
        return CharClass.SURROGATE_PAIR
    if code in _HIGH_SURROGATES:
        if index + 1 < len(text) and ord(text[index + 1]) in _LOW_SURROGATES:
            return CharClass.SURROGATE_PAIR
        return CharClass.LONE_SURROGATE
    if code in _LOW_SURROGATES:
        return CharClass.LONE_SURROGATE

    if char == "\0" and not json:
        following = text[index + 1 : index + 2]
        if not (following and following in "0123456789"):
            return CharClass.NUL

    if char in QUOTE_CHARS:
        return CharClass.QUOTE
    if char in SINGLE_ESCAPES:
        return CharClass.SINGLE_ESCAPE
    return CharClass.HEX


def escape_text(  # noqa: PLR0912
    text: str,
    *,
    quote: str = "'",
    escape_everything: bool = False,
    minimal: bool = False,
    is_script_context: bool = False,
    wrap: bool = False,
    es6: bool = False,
    json: bool = False,
    lowercase_hex: bool = False,
) -> str:
    """
    Escapes ``text`` so it can sit between ``quote`` characters.

    Works on code points. Astral characters are treated the way a UTF-16
    engine sees them, as a surrogate pair; an explicit high/low surrogate
    pair in the input is treated the same way.
    """
    result: list[str] = []
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        kind = classify_char(
            text, index, escape_everything=escape_everything, json=json
        )

        if kind is CharClass.LITERAL:
            result.append(char)
            index += 1
            continue

        if kind is CharClass.SURROGATE_PAIR:
            code = ord(char)
            if code >= _ASTRAL_START:
                raw = char
                high, low = split_surrogates(code)
                code_point = code
            else:
                raw = text[index : index + 2]
                high, low = code, ord(text[index + 1])
                code_point = (high - 0xD800) * 0x400 + low - 0xDC00 + 0x10000
            index += len(raw)

            if minimal:
                result.append(raw)
            elif es6:
                hex_digits = _hexadecimal(code_point, lowercase_hex)
                result.append("\\u{" + hex_digits + "}")
            else:
                result.append(four_hex_escape(high, lowercase_hex))
                result.append(four_hex_escape(low, lowercase_hex))
            continue

        index += 1
        if kind is CharClass.LONE_SURROGATE:
            result.append(four_hex_escape(ord(char), lowercase_hex))
        elif kind is CharClass.NUL:
            result.append("\\0")
        elif kind is CharClass.QUOTE:
            if char == quote or escape_everything:
                result.append("\\" + char)
            else:
                result.append(char)
        elif kind is CharClass.SINGLE_ESCAPE:
            result.append(SINGLE_ESCAPES[char])
        elif minimal and char not in PROBLEMATIC_WHITESPACE:
            result.append(char)
        else:
            hex_digits = _hexadecimal(ord(char), lowercase_hex)
            if json or len(hex_digits) > 2:
                result.append(four_hex_escape(ord(char), lowercase_hex))
            else:
                result.append("\\x" + hex_digits.rjust(2, "0"))

    escaped = "".join(result)

    if quote == "`":
        escaped = _TEMPLATE_INTERPOLATION.sub(r"\\${", escaped)
    if is_script_context:
        # https://mathiasbynens.be/notes/etago
        escaped = _CLOSING_TAG.sub(r"<\\/\1", escaped)
        escaped = _COMMENT_OPEN.sub(
            r"\\u003C!--" if json else r"\\x3C!--", escaped
        )
    if wrap:
        escaped = quote + escaped + quote
    return escaped
