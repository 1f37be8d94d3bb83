"""
Pytest configuration and shared fixtures for jslit tests.

Provides immutable test case fixtures and a small JavaScript string literal
reader used to check that encoded strings evaluate back to their input.
"""

from dataclasses import dataclass
from dataclasses import field
from typing import Any

import pytest

# Escapes a JavaScript engine resolves to a single character
_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

_QUOTE_CHARS = {"single": "'", "double": '"', "backtick": "`"}


@dataclass(frozen=True)
class LiteralTestCase:
    """
    Immutable container for an encoding test case.

    Holds the input value, the options to encode it with and the exact
    literal text expected back.
    """

    description: str
    value: Any
    expected: str
    options: dict[str, Any] = field(default_factory=dict)


def utf16_units(text: str) -> list[int]:
    """Returns the UTF-16 code units a JavaScript engine would store."""
    data = text.encode("utf-16-le", "surrogatepass")
    return [
        int.from_bytes(data[i : i + 2], "little")
        for i in range(0, len(data), 2)
    ]


def read_string_literal(body: str, quote: str) -> list[int]:
    """
    Evaluates the body of a JavaScript string literal.

    Returns the UTF-16 code units of the resulting string, and fails the
    test on anything an engine would reject: an unescaped delimiter, a raw
    line break outside template literals, or an unescaped `${`.
    """
    units: list[int] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\":
            assert char != quote, f"unescaped delimiter at {index}"
            if quote != "`":
                assert char not in "\n\r", f"raw line break at {index}"
            else:
                assert body[index : index + 2] != "${", (
                    f"unescaped interpolation at {index}"
                )
            units.extend(utf16_units(char))
            index += 1
            continue

        escape = body[index + 1]
        if escape == "u" and body[index + 2] == "{":
            end = body.index("}", index)
            units.extend(utf16_units(chr(int(body[index + 3 : end], 16))))
            index = end + 1
        elif escape == "u":
            units.append(int(body[index + 2 : index + 6], 16))
            index += 6
        elif escape == "x":
            units.append(int(body[index + 2 : index + 4], 16))
            index += 4
        elif escape == "0":
            following = body[index + 2 : index + 3]
            assert not following.isdigit(), f"octal-like escape at {index}"
            units.append(0)
            index += 2
        else:
            units.extend(utf16_units(_SIMPLE_ESCAPES.get(escape, escape)))
            index += 2
    return units


def evaluate_string(literal: str, quotes: str = "single") -> list[int]:
    """Evaluates a wrapped JavaScript string literal to UTF-16 code units."""
    quote = _QUOTE_CHARS[quotes]
    assert literal[0] == quote and literal[-1] == quote
    return read_string_literal(literal[1:-1], quote)


@pytest.fixture(scope="session")
def all_symbols() -> str:
    """
    Provides a string sampling the whole code point range.

    Every 15th code point from U+0000 to U+10FFFF, space separated, which
    includes control characters, quotes and lone surrogates.
    """
    return "".join(
        chr(code_point) + " " for code_point in range(0, 0x10FFFF + 1, 0xF)
    )


@pytest.fixture
def empty_containers() -> list[LiteralTestCase]:
    """
    Provides the empty value of every container kind.

    Each renders as the bare constructor or bracket pair.
    """
    from jslit import JSMap

    return [
        LiteralTestCase("empty list", [], "[]"),
        LiteralTestCase("empty tuple", (), "[]"),
        LiteralTestCase("empty dict", {}, "{}"),
        LiteralTestCase("empty map", JSMap(), "new Map()"),
        LiteralTestCase("empty set", set(), "new Set()"),
        LiteralTestCase("empty frozenset", frozenset(), "new Set()"),
        LiteralTestCase("empty bytes", b"", "Buffer.from([])"),
        LiteralTestCase("empty bytearray", bytearray(), "Buffer.from([])"),
    ]


@pytest.fixture
def number_base_cases() -> list[LiteralTestCase]:
    """Provides integer rendering cases across every number base."""
    return [
        LiteralTestCase("decimal", 255, "255"),
        LiteralTestCase(
            "hexadecimal", 255, "0xFF", {"numbers": "hexadecimal"}
        ),
        LiteralTestCase(
            "lowercase hexadecimal",
            255,
            "0xff",
            {"numbers": "hexadecimal", "lowercase_hex": True},
        ),
        LiteralTestCase("binary", 255, "0b11111111", {"numbers": "binary"}),
        LiteralTestCase("octal", 255, "0o377", {"numbers": "octal"}),
        LiteralTestCase(
            "negative hexadecimal", -255, "-0xFF", {"numbers": "hexadecimal"}
        ),
        LiteralTestCase("zero binary", 0, "0b0", {"numbers": "binary"}),
    ]
