"""
JavaScript literal encoding library.

Turns Python values into JavaScript (or JSON) literal text that evaluates
back to an equivalent value, with configurable quoting, escaping,
number bases and layout.
"""

import dataclasses
import inspect
import logging
import math
import os
import re
import time
import types
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from decimal import Decimal
from enum import Enum
from typing import IO
from typing import Any

from jslit._escape import escape_text

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JSLIT_PROFILE" in os.environ

# Integers above this magnitude are not exact as JavaScript numbers
EXACT_FLOAT_INT_LIMIT = 2**53

_WHITESPACE_RUN = re.compile(r"\s+")

# JavaScript-style option names accepted alongside the Python ones
_OPTION_ALIASES = {
    "escapeEverything": "escape_everything",
    "isScriptContext": "is_script_context",
    "lowercaseHex": "lowercase_hex",
    "indentLevel": "indent_level",
}

# Options whose default depends on `json` unless given explicitly
_JSON_DEFAULTED = ("quotes", "wrap")


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during encoding."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments to nullcontext
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ValueKind(Enum):
    """
    Runtime kinds the encoder dispatches on.

    Computed once per value by `classify`, so the recursion itself is a
    plain match over these members.
    """

    STRING = "string"
    NUMBER = "number"
    BIGINT = "bigint"
    ARRAY = "array"
    MAP = "map"
    SET = "set"
    BYTES = "bytes"
    RECORD = "record"
    OTHER = "other"


class Quotes(Enum):
    """Quote character used to wrap strings."""

    SINGLE = "single"
    DOUBLE = "double"
    BACKTICK = "backtick"

    @property
    def char(self) -> str:
        return _QUOTE_CHARS[self]


_QUOTE_CHARS = {Quotes.SINGLE: "'", Quotes.DOUBLE: '"', Quotes.BACKTICK: "`"}


class NumberBase(Enum):
    """Base used for integer literals."""

    DECIMAL = "decimal"
    BINARY = "binary"
    OCTAL = "octal"
    HEXADECIMAL = "hexadecimal"


class _Undefined:
    """The JavaScript `undefined` value."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


class BigInt(int):
    """An integer rendered as a JavaScript BigInt literal (`42n`)."""

    def __repr__(self) -> str:
        return f"BigInt({int(self)})"


class JSMap(dict[Any, Any]):
    """A dict rendered as `new Map(...)` even when all keys are strings."""


@dataclass(frozen=True)
class EncodeOptions:
    """
    Configures literal encoding with immutable settings.

    Choice-valued fields accept either the enum member or its string value;
    anything unrecognised falls back to the default instead of raising.
    `quotes` and `wrap` left as None resolve to double quotes and wrapping
    under `json`, single quotes and no wrapping otherwise.
    """

    escape_everything: bool = False
    minimal: bool = False
    is_script_context: bool = False
    quotes: Quotes | str | None = None
    wrap: bool | None = None
    es6: bool = False
    json: bool = False
    compact: bool = True
    lowercase_hex: bool = False
    numbers: NumberBase | str = NumberBase.DECIMAL
    indent: str = "\t"
    indent_level: int = 0
    # json-defaulted fields the caller set explicitly
    _given: frozenset[str] = field(
        default=frozenset(), init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        given = frozenset(
            name for name in _JSON_DEFAULTED if getattr(self, name) is not None
        )
        object.__setattr__(self, "_given", given)
        if self.quotes is None:
            quotes = Quotes.DOUBLE if self.json else Quotes.SINGLE
        else:
            quotes = _coerce_choice(Quotes, self.quotes, Quotes.SINGLE)
        object.__setattr__(self, "quotes", quotes)
        if self.wrap is None:
            object.__setattr__(self, "wrap", bool(self.json))
        object.__setattr__(
            self,
            "numbers",
            _coerce_choice(NumberBase, self.numbers, NumberBase.DECIMAL),
        )
        if not isinstance(self.indent, str):
            logger.debug("Ignoring non-string indent %r", self.indent)
            object.__setattr__(self, "indent", "\t")
        if not isinstance(self.indent_level, int) or self.indent_level < 0:
            logger.debug("Ignoring invalid indent_level %r", self.indent_level)
            object.__setattr__(self, "indent_level", 0)

    @property
    def quote(self) -> str:
        """The wrapping quote character."""
        return Quotes(self.quotes).char


def _coerce_choice(enum_type: type[Enum], value: Any, default: Any) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except (ValueError, TypeError):
        logger.debug(
            "Unknown %s value %r, using %r",
            enum_type.__name__,
            value,
            default.value,
        )
        return default


_OPTION_FIELDS = frozenset(
    f.name for f in dataclasses.fields(EncodeOptions) if f.init
)


def normalize_options(
    options: EncodeOptions | Mapping[str, Any] | None = None, **kwargs: Any
) -> EncodeOptions:
    """
    Builds a complete `EncodeOptions` from caller-supplied overrides.

    When `json` is requested, `quotes` and `wrap` default to double quotes
    and wrapping; explicit values for either still win. Unknown keys are
    ignored.
    """
    if isinstance(options, EncodeOptions):
        if not kwargs:
            return options
        overrides = {
            name: getattr(options, name)
            for name in _OPTION_FIELDS
            if name not in _JSON_DEFAULTED or name in options._given
        }
    else:
        overrides = dict(options or {})
    overrides.update(kwargs)

    settings: dict[str, Any] = {}
    for key, value in overrides.items():
        name = _OPTION_ALIASES.get(key, key)
        if name in _OPTION_FIELDS:
            settings[name] = value
        else:
            logger.debug("Ignoring unknown option %r", key)

    return EncodeOptions(**settings)


@dataclass(frozen=True)
class _EncodeContext:
    """
    Per-call recursion state derived from the options.

    `inline_children` marks an array whose elements render inline;
    `inline` marks an array that itself renders on one line. Every change
    produces a new context, so sibling subtrees never share state.
    """

    options: EncodeOptions
    level: int
    wrap: bool
    inline_children: bool = False
    inline: bool = False

    @property
    def indentation(self) -> str:
        return self.options.indent * self.level

    @property
    def newline(self) -> str:
        return "" if self.options.compact else "\n"


def classify(value: Any) -> ValueKind:  # noqa: PLR0911
    """Determines which `ValueKind` branch encodes ``value``."""
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool) or value is None or value is UNDEFINED:
        return ValueKind.OTHER
    if isinstance(value, BigInt):
        return ValueKind.BIGINT
    if isinstance(value, int | float):
        return ValueKind.NUMBER
    if isinstance(value, bytes | bytearray | memoryview):
        return ValueKind.BYTES
    if isinstance(value, list | tuple):
        return ValueKind.ARRAY
    if isinstance(value, JSMap):
        return ValueKind.MAP
    if isinstance(value, Mapping):
        if all(isinstance(key, str) for key in value):
            return ValueKind.RECORD
        return ValueKind.MAP
    if isinstance(value, set | frozenset):
        return ValueKind.SET
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.RECORD
    if isinstance(value, types.SimpleNamespace):
        return ValueKind.RECORD
    return ValueKind.OTHER


def _record_items(value: Any) -> list[tuple[str, Any]]:
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, types.SimpleNamespace):
        return list(vars(value).items())
    return [
        (field.name, getattr(value, field.name))
        for field in dataclasses.fields(value)
    ]


def _js_float_repr(value: float) -> str:
    """
    Renders a finite float the way JavaScript's `Number#toString` does.

    Python's `repr` already yields the shortest round-tripping digits; only
    the placement of the decimal point and exponent differs.
    """
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    digits_tuple, exponent = Decimal(repr(abs(value))).as_tuple()[1:]
    digits = "".join(map(str, digits_tuple)).rstrip("0")
    # Decimal point position relative to the digit string
    point = len(digits_tuple) + int(exponent)
    count = len(digits)

    if count <= point <= 21:
        body = digits + "0" * (point - count)
    elif 0 < point <= 21:
        body = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        power = point - 1
        mantissa = digits if count == 1 else digits[0] + "." + digits[1:]
        body = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + body


def _json_number(value: int | float) -> str:
    if isinstance(value, int) and abs(value) <= EXACT_FLOAT_INT_LIMIT:
        return str(int(value))
    try:
        number = float(value)
    except OverflowError:
        return "null"
    if not math.isfinite(number):
        return "null"
    return _js_float_repr(number)


def format_number(value: int | float, options: EncodeOptions) -> str:
    """
    Renders a number or `BigInt` as a literal in the configured base.

    Under `json`, values go through the JSON numeric fallback instead:
    non-finite numbers become `null` and integers beyond the exact float
    range are coerced through a float.
    """
    if options.json:
        return _json_number(value)

    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if not value.is_integer() or options.numbers is NumberBase.DECIMAL:
            return _js_float_repr(value)
        value = int(value)

    sign = "-" if value < 0 else ""
    magnitude = abs(int(value))
    base = options.numbers
    if base is NumberBase.HEXADECIMAL:
        digits = format(magnitude, "x" if options.lowercase_hex else "X")
        result = f"{sign}0x{digits}"
    elif base is NumberBase.BINARY:
        result = f"{sign}0b{magnitude:b}"
    elif base is NumberBase.OCTAL:
        result = f"{sign}0o{magnitude:o}"
    else:
        result = f"{sign}{magnitude}"

    if isinstance(value, BigInt):
        return result + "n"
    return result


def _callable_source(value: Callable[..., Any], quote: str) -> str:
    try:
        source = inspect.getsource(value)
    except (OSError, TypeError):
        logger.debug("No source available for %r, using repr", value)
        return repr(value)
    flattened = _WHITESPACE_RUN.sub(" ", source).strip()
    return flattened.replace('"', quote)


def _encode_other(value: Any, options: EncodeOptions) -> str:  # noqa: PLR0911
    """Encodes scalars that are neither strings nor numbers."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if options.json:
        # Nothing else has a JSON representation
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if callable(value):
        return _callable_source(value, options.quote)
    return str(value)


def _encode_array(items: list[Any], ctx: _EncodeContext) -> str:
    """Encodes a sequence with layout and inline-collapse rules."""
    if not items:
        return "[]"

    options = ctx.options
    level = ctx.level if ctx.inline else ctx.level + 1
    child = dataclasses.replace(ctx, level=level, wrap=True)
    if ctx.inline_children:
        child = dataclasses.replace(child, inline_children=False, inline=True)
    if ctx.inline:
        child = dataclasses.replace(child, inline=False)

    prefix = "" if options.compact or ctx.inline else child.indentation
    encoded = [prefix + _encode_value(item, child) for item in items]

    if ctx.inline:
        return "[" + ", ".join(encoded) + "]"
    newline = ctx.newline
    closing = "" if options.compact else ctx.indentation
    body = ("," + newline).join(encoded)
    return "[" + newline + body + newline + closing + "]"


def _encode_record(items: list[tuple[str, Any]], ctx: _EncodeContext) -> str:
    """Encodes key/value pairs as an object literal."""
    if not items:
        return "{}"

    options = ctx.options
    child = dataclasses.replace(ctx, level=ctx.level + 1, wrap=True)
    prefix = "" if options.compact else child.indentation
    separator = ":" if options.compact else ": "
    encoded = [
        prefix
        + _encode_value(key, child)
        + separator
        + _encode_value(value, child)
        for key, value in items
    ]

    newline = ctx.newline
    closing = "" if options.compact else ctx.indentation
    body = ("," + newline).join(encoded)
    return "{" + newline + body + newline + closing + "}"


def _escape(text: str, options: EncodeOptions, wrap: bool) -> str:
    return escape_text(
        text,
        quote=options.quote,
        escape_everything=options.escape_everything,
        minimal=options.minimal,
        is_script_context=options.is_script_context,
        wrap=wrap,
        es6=options.es6,
        json=options.json,
        lowercase_hex=options.lowercase_hex,
    )


def _encode_value(value: Any, ctx: _EncodeContext) -> str:  # noqa: PLR0911
    """Encodes one value within an existing recursion context."""
    with ProfileContext("encode_value"):
        options = ctx.options

        if options.json:
            to_json = getattr(value, "to_json", None)
            if callable(to_json) and not isinstance(value, type):
                logger.debug("Encoding to_json() result of %r", type(value))
                value = to_json()

        kind = classify(value)

        if kind is ValueKind.STRING:
            with ProfileContext("escape_string", len(value)):
                return _escape(value, options, ctx.wrap)
        elif kind is ValueKind.MAP:
            if not value:
                return "new Map()"
            entries = [[key, item] for key, item in value.items()]
            if not options.compact:
                ctx = dataclasses.replace(
                    ctx, inline_children=True, inline=False
                )
            return f"new Map({_encode_array(entries, ctx)})"
        elif kind is ValueKind.SET:
            if not value:
                return "new Set()"
            return f"new Set({_encode_array(list(value), ctx)})"
        elif kind is ValueKind.BYTES:
            data = bytes(value)
            if not data:
                return "Buffer.from([])"
            return f"Buffer.from({_encode_array(list(data), ctx)})"
        elif kind is ValueKind.ARRAY:
            return _encode_array(list(value), ctx)
        elif kind is ValueKind.NUMBER or kind is ValueKind.BIGINT:
            return format_number(value, options)
        elif kind is ValueKind.RECORD:
            return _encode_record(_record_items(value), ctx)
        else:
            return _encode_other(value, options)


def encode(
    value: Any,
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> str:
    """
    Encodes a Python value as JavaScript literal text.

    Options may be given as an `EncodeOptions`, a mapping, keyword
    arguments, or a mix; keyword arguments win. Never raises for any input
    value, but cyclic structures recurse until `RecursionError`.
    """
    config = normalize_options(options, **kwargs)
    ctx = _EncodeContext(
        options=config, level=config.indent_level, wrap=config.wrap
    )
    return _encode_value(value, ctx)


def escape_string(
    text: str,
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> str:
    """
    Escapes a single string, honouring quoting and wrapping options.

    Equivalent to `encode` for string input.
    """
    config = normalize_options(options, **kwargs)
    return _escape(text, config, config.wrap)


def dump(
    value: Any,
    fp: IO[str],
    options: EncodeOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> None:
    """
    Writes the literal encoding of ``value`` to a file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(encode(value, options, **kwargs))


__all__ = [
    "UNDEFINED",
    "BigInt",
    "EncodeOptions",
    "HotPathStats",
    "JSMap",
    "NumberBase",
    "Quotes",
    "ValueKind",
    "classify",
    "clear_hot_path_stats",
    "dump",
    "encode",
    "escape_string",
    "format_number",
    "get_hot_path_stats",
    "normalize_options",
]
