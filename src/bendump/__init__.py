"""
Zero-copy bencode decoding library with an indented tree dump.

Decodes bencoded byte buffers into a tree of typed nodes whose byte strings are
views into the original buffer, and renders such trees as human-readable text.
"""

import logging
import os
import sys
import time
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import IO
from typing import Any
from typing import ClassVar

from ._reader import FileReadError
from ._reader import read_file

__version__ = "0.1.0"

# Recursive node type; the four variants are defined below
type Value = BString | BInteger | BList | BDict
type Position = int

# Largest magnitude the integer scanner accepts, for either sign
INT64_MAX = 2**63 - 1
DEFAULT_MAX_DEPTH = 256

# Grammar bytes, compared against single indexed bytes (ints)
DIGITS = b"0123456789"
ZERO = ord("0")
MINUS = ord("-")
COLON = ord(":")
INTEGER_START = ord("i")
LIST_START = ord("l")
DICT_START = ord("d")
END = ord("e")

INDENT_UNIT = b"  "

logger = logging.getLogger(__name__)

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "BENDUMP_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    bytes_processed: int = 0

    def record_call(self, duration_ns: int, nbytes: int = 0) -> None:
        """Records a function call with timing and byte processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.bytes_processed += nbytes


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, nbytes: int = 0):
            self.func_name = func_name
            self.nbytes = nbytes
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.nbytes)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, nbytes: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ErrorKind(Enum):
    """
    Classifies decode failures.

    Every failure is structural and aborts the whole parse; the kind is kept
    on the raised error for diagnostics and tests.
    """

    END_OF_INPUT = "end of input"
    MALFORMED_INTEGER = "malformed integer"
    INTEGER_OVERFLOW = "integer overflow"
    MALFORMED_STRING = "malformed string"
    UNTERMINATED_COMPOSITE = "unterminated composite"
    INVALID_DICTIONARY_KEY = "invalid dictionary key"
    UNKNOWN_LEADING_BYTE = "unknown leading byte"
    NESTING_TOO_DEEP = "nesting too deep"
    NON_CANONICAL = "non-canonical encoding"
    TRAILING_DATA = "trailing data"


class BencodeDecodeError(ValueError):
    """
    Handles bencode parsing failures with byte offset and failure kind.

    Raised once per failed parse; no partial tree is ever returned alongside.
    """

    def __init__(
        self, msg: str, doc: bytes, pos: Position, kind: ErrorKind
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")
        if not isinstance(kind, ErrorKind):
            raise TypeError("kind must be an ErrorKind")

        self.msg = msg
        self.doc = doc
        self.pos = pos
        self.kind = kind

        super().__init__(f"{msg} at offset {pos}")


class ValueKind(Enum):
    """Tags the four node variants of a decoded tree."""

    STRING = "string"
    INTEGER = "integer"
    LIST = "list"
    DICTIONARY = "dictionary"


@dataclass(frozen=True, eq=False, repr=False)
class BString:
    """
    Byte string node viewing a slice of the decoded buffer.

    The node keeps a reference to its source buffer, so the viewed bytes stay
    alive for as long as the node is reachable. Nothing is copied unless
    ``to_bytes`` is called. Compares and hashes by content, and compares equal
    to the plain ``bytes`` it views.
    """

    kind: ClassVar[ValueKind] = ValueKind.STRING

    source: bytes
    offset: Position
    length: int

    def __post_init__(self) -> None:
        if not isinstance(self.source, bytes):
            raise TypeError("source must be bytes")
        if (
            self.offset < 0
            or self.length < 0
            or self.offset + self.length > len(self.source)
        ):
            raise ValueError("string view must lie within its source buffer")

    def view(self) -> memoryview:
        """Returns a zero-copy view of the string bytes."""
        return memoryview(self.source)[self.offset : self.offset + self.length]

    def to_bytes(self) -> bytes:
        """Returns an owned copy of the string bytes."""
        return self.source[self.offset : self.offset + self.length]

    def to_python(self) -> bytes:
        return self.to_bytes()

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BString):
            return self.view() == other.view()
        if isinstance(other, bytes | bytearray | memoryview):
            return self.view() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"BString({self.to_bytes()!r})"


@dataclass(frozen=True)
class BInteger:
    """Signed integer node within the 64-bit range."""

    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    value: int

    def to_python(self) -> int:
        return self.value

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class BList:
    """Ordered list node exclusively owning its children."""

    kind: ClassVar[ValueKind] = ValueKind.LIST

    items: list[Value] = field(default_factory=list)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


@dataclass(frozen=True)
class BDict:
    """
    Dictionary node holding key/value pairs in encounter order.

    Keys are always ``BString`` nodes. Duplicate keys are kept as separate
    pairs; lookups by key return the first matching pair. Iterating the node
    yields the ``(key, value)`` pairs.
    """

    kind: ClassVar[ValueKind] = ValueKind.DICTIONARY

    pairs: list[tuple[BString, Value]] = field(default_factory=list)

    def keys(self) -> list[BString]:
        return [key for key, _ in self.pairs]

    def values(self) -> list[Value]:
        return [value for _, value in self.pairs]

    def get(self, key: bytes, default: Any = None) -> Any:
        """Returns the value of the first pair whose key equals ``key``."""
        for candidate, value in self.pairs:
            if candidate == key:
                return value
        return default

    def to_python(self) -> dict[bytes, Any]:
        """Converts to a plain dict; for duplicate keys the last pair wins."""
        return {key.to_bytes(): value.to_python() for key, value in self.pairs}

    def __getitem__(self, key: bytes) -> Value:
        for candidate, value in self.pairs:
            if candidate == key:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return any(candidate == key for candidate, _ in self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[BString, Value]]:
        return iter(self.pairs)


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures bencode decoding behavior with immutable settings.

    ``strict`` turns the permissive decoder into a canonical-form validator:
    leading zeros, unsorted or duplicate dictionary keys and trailing bytes
    are rejected. ``max_depth`` bounds list/dictionary nesting; ``None``
    disables the limit.
    """

    strict: bool = False
    max_depth: int | None = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if self.max_depth is not None:
            if not isinstance(self.max_depth, int) or isinstance(
                self.max_depth, bool
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 0:
                raise ValueError("max_depth must be a non-negative integer")


class Cursor:
    """
    Read position and exclusive end bound over an immutable buffer.

    The buffer has no terminator, so every read is checked against ``end``.
    """

    def __init__(
        self, data: bytes, end: Position | None = None, pos: Position = 0
    ) -> None:
        self.data = data
        self.end = len(data) if end is None else end
        self.pos = pos

        if not 0 <= self.end <= len(data):
            raise ValueError("end must lie within the buffer")
        if not 0 <= self.pos <= self.end:
            raise ValueError("pos must lie between 0 and end")

    @property
    def at_end(self) -> bool:
        return self.pos >= self.end

    @property
    def remaining(self) -> int:
        return self.end - self.pos

    def peek(self) -> int:
        """Returns the current byte without advancing."""
        if self.pos >= self.end:
            raise self.error(
                "Unexpected end of input", ErrorKind.END_OF_INPUT
            )
        return self.data[self.pos]

    def advance(self, n: int = 1) -> None:
        """Moves forward by ``n`` bytes, stopping at the end bound."""
        self.pos = min(self.pos + n, self.end)

    def error(
        self, msg: str, kind: ErrorKind, pos: Position | None = None
    ) -> BencodeDecodeError:
        """Builds a decode error at ``pos`` (default: the current position)."""
        return BencodeDecodeError(
            msg, self.data, self.pos if pos is None else pos, kind
        )


def scan_integer(cursor: Cursor, delimiter: int) -> tuple[int, bool]:
    """
    Scans ``-?[0-9]+`` followed by ``delimiter``.

    Leaves the cursor just past the delimiter and returns the signed value and
    whether a minus sign was present. The magnitude is checked against
    ``INT64_MAX`` before each multiplication.
    """
    with ProfileContext("scan_integer"):
        start = cursor.pos
        if cursor.at_end:
            raise cursor.error(
                "Expecting integer", ErrorKind.END_OF_INPUT
            )

        negative = False
        if cursor.peek() == MINUS:
            negative = True
            cursor.advance()

        data = cursor.data
        value = 0
        digits = 0
        while cursor.pos < cursor.end and data[cursor.pos] != delimiter:
            byte = data[cursor.pos]
            if byte not in DIGITS:
                raise cursor.error(
                    f"Invalid digit {bytes([byte])!r} in integer",
                    ErrorKind.MALFORMED_INTEGER,
                )
            digit = byte - ZERO
            if value > (INT64_MAX - digit) // 10:
                raise cursor.error(
                    "Integer out of 64-bit range",
                    ErrorKind.INTEGER_OVERFLOW,
                    start,
                )
            value = value * 10 + digit
            digits += 1
            cursor.advance()

        if cursor.at_end:
            raise cursor.error(
                f"Unterminated integer, expecting {chr(delimiter)!r}",
                ErrorKind.END_OF_INPUT,
            )
        if digits == 0:
            raise cursor.error(
                "Expecting digits", ErrorKind.MALFORMED_INTEGER, start
            )
        if negative and value == 0:
            raise cursor.error(
                "Negative zero is not allowed",
                ErrorKind.MALFORMED_INTEGER,
                start,
            )

        cursor.advance()  # delimiter
        return (-value if negative else value), negative


class BencodeParser:
    """
    Recursive descent parser building a value tree from a cursor.

    Each sub-parser consumes exactly its own span and leaves the cursor on the
    first byte after it. Any failure raises immediately; the partially built
    subtree is simply dropped.
    """

    def __init__(self, cursor: Cursor, config: ParseConfig | None = None):
        self.cursor = cursor
        self.config = config or ParseConfig()
        self.depth = 0

    def parse_value(self) -> Value:
        """Parses any value based on the lookahead byte."""
        cursor = self.cursor
        if cursor.at_end:
            raise cursor.error("Expecting value", ErrorKind.END_OF_INPUT)

        lead = cursor.peek()
        if lead in DIGITS:
            return self.parse_string()
        elif lead == INTEGER_START:
            return self.parse_integer()
        elif lead == LIST_START:
            return self.parse_list()
        elif lead == DICT_START:
            return self.parse_dict()
        else:
            raise cursor.error(
                f"Unexpected byte {bytes([lead])!r}",
                ErrorKind.UNKNOWN_LEADING_BYTE,
            )

    def parse_string(self) -> BString:
        """Parses ``<length>:<bytes>`` into a view over the buffer."""
        with ProfileContext("parse_string"):
            cursor = self.cursor
            start = cursor.pos
            length, negative = scan_integer(cursor, COLON)
            if negative:
                raise cursor.error(
                    "String length must not be negative",
                    ErrorKind.MALFORMED_INTEGER,
                    start,
                )
            self._check_canonical_digits(start, cursor.pos - 1)

            if length > cursor.remaining:
                raise cursor.error(
                    f"String of length {length} runs past end of input",
                    ErrorKind.MALFORMED_STRING,
                    start,
                )

            node = BString(cursor.data, cursor.pos, length)
            cursor.advance(length)
            return node

    def parse_integer(self) -> BInteger:
        """Parses ``i<digits>e``."""
        with ProfileContext("parse_integer"):
            cursor = self.cursor
            cursor.advance()  # 'i'
            start = cursor.pos
            value, negative = scan_integer(cursor, END)
            self._check_canonical_digits(
                start + 1 if negative else start, cursor.pos - 1
            )
            return BInteger(value)

    def parse_list(self) -> BList:
        """Parses ``l<values>e``."""
        with ProfileContext("parse_list"):
            cursor = self.cursor
            start = cursor.pos
            self._enter_composite(start)
            cursor.advance()  # 'l'

            items: list[Value] = []
            while not cursor.at_end and cursor.peek() != END:
                items.append(self.parse_value())

            if cursor.at_end:
                raise cursor.error(
                    "Unterminated list",
                    ErrorKind.UNTERMINATED_COMPOSITE,
                    start,
                )

            cursor.advance()  # 'e'
            self.depth -= 1
            return BList(items)

    def parse_dict(self) -> BDict:
        """Parses ``d<key><value>...e``; every key must be a string."""
        with ProfileContext("parse_dict"):
            cursor = self.cursor
            start = cursor.pos
            self._enter_composite(start)
            cursor.advance()  # 'd'

            pairs: list[tuple[BString, Value]] = []
            previous_key: bytes | None = None
            while not cursor.at_end and cursor.peek() != END:
                key_pos = cursor.pos
                key = self.parse_value()
                if not isinstance(key, BString):
                    raise cursor.error(
                        "Dictionary keys must be strings, "
                        f"not {key.kind.value}",
                        ErrorKind.INVALID_DICTIONARY_KEY,
                        key_pos,
                    )
                if self.config.strict:
                    raw_key = key.to_bytes()
                    if previous_key is not None and raw_key <= previous_key:
                        raise cursor.error(
                            f"Dictionary key {raw_key!r} is out of order",
                            ErrorKind.NON_CANONICAL,
                            key_pos,
                        )
                    previous_key = raw_key

                value = self.parse_value()
                pairs.append((key, value))

            if cursor.at_end:
                raise cursor.error(
                    "Unterminated dictionary",
                    ErrorKind.UNTERMINATED_COMPOSITE,
                    start,
                )

            cursor.advance()  # 'e'
            self.depth -= 1
            return BDict(pairs)

    def _enter_composite(self, start: Position) -> None:
        self.depth += 1
        max_depth = self.config.max_depth
        if max_depth is not None and self.depth > max_depth:
            raise self.cursor.error(
                f"Maximum nesting depth of {max_depth} exceeded",
                ErrorKind.NESTING_TOO_DEEP,
                start,
            )

    def _check_canonical_digits(self, first: Position, stop: Position) -> None:
        """In strict mode, rejects a leading zero in ``data[first:stop]``."""
        if (
            self.config.strict
            and stop - first > 1
            and self.cursor.data[first] == ZERO
        ):
            raise self.cursor.error(
                "Leading zeros are not allowed",
                ErrorKind.NON_CANONICAL,
                first,
            )


def _parse_buffer(buffer: bytes, length: int, config: ParseConfig) -> Value:
    """Parses one top-level value from ``buffer[:length]``."""
    with ProfileContext("parse", length):
        cursor = Cursor(buffer, length)
        parser = BencodeParser(cursor, config)
        try:
            result = parser.parse_value()
        except RecursionError as e:
            # Only reachable with a large max_depth or none at all
            raise cursor.error(
                "Nesting exceeds the interpreter recursion limit",
                ErrorKind.NESTING_TOO_DEEP,
            ) from e

        if config.strict and not cursor.at_end:
            raise cursor.error("Extra data", ErrorKind.TRAILING_DATA)

        return result


def parse(buffer: bytes, length: int | None = None, **kwargs: Any) -> Value:
    """
    Decodes the first ``length`` bytes of ``buffer`` into a value tree.

    The whole buffer is decoded when ``length`` is None. Options are passed
    through to ``ParseConfig``. Byte strings in the result are views into
    ``buffer``. Raises ``BencodeDecodeError`` for malformed input.
    """
    if not isinstance(buffer, bytes):
        raise TypeError(
            f"the bencode object must be bytes, not {type(buffer).__name__}"
        )
    if length is None:
        length = len(buffer)
    elif not isinstance(length, int) or isinstance(length, bool):
        raise TypeError("length must be an integer")
    elif not 0 <= length <= len(buffer):
        raise ValueError("length must lie between 0 and len(buffer)")

    config = ParseConfig(**kwargs)
    try:
        result = _parse_buffer(buffer, length, config)
    except BencodeDecodeError as exc:
        logger.debug("decode failed (%s): %s", exc.kind.name, exc)
        raise

    logger.debug("decoded %d bytes into a %s", length, result.kind.value)
    return result


def loads(b: bytes, **kwargs: Any) -> Value:
    """Decodes a complete bencoded buffer."""
    return parse(b, **kwargs)


def load(fp: IO[bytes], **kwargs: Any) -> Value:
    """
    Decodes bencoded data read from a binary file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), **kwargs)


def _render(
    value: Value, level: int, chunks: list[bytes | memoryview]
) -> None:
    """Appends the dump of ``value`` at ``level`` to ``chunks``."""
    pad = INDENT_UNIT * level
    if isinstance(value, BInteger):
        chunks.append(b"%bInt: %d\n" % (pad, value.value))
    elif isinstance(value, BString):
        chunks.append(b"%bString (%d): " % (pad, value.length))
        chunks.append(value.view())
        chunks.append(b"\n")
    elif isinstance(value, BList):
        chunks.append(pad + b"List:\n")
        for item in value.items:
            _render(item, level + 1, chunks)
    elif isinstance(value, BDict):
        chunks.append(pad + b"Dict:\n")
        inner = pad + INDENT_UNIT
        for key, item in value.pairs:
            chunks.append(inner + b"Key:\n")
            _render(key, level + 2, chunks)
            chunks.append(inner + b"Value:\n")
            _render(item, level + 2, chunks)
    else:
        msg = f"Object of type {type(value).__name__} is not a bencode value"
        raise TypeError(msg)


def dumps(value: Value, indent: int = 0) -> bytes:
    """
    Renders a value tree as an indented dump, two spaces per level.

    String bytes are emitted verbatim, so the dump is a byte string.
    """
    if not isinstance(indent, int) or isinstance(indent, bool):
        raise TypeError("indent must be an integer")
    if indent < 0:
        raise ValueError("indent must be a non-negative integer")

    with ProfileContext("dumps"):
        chunks: list[bytes | memoryview] = []
        _render(value, indent, chunks)
        return b"".join(chunks)


def dump(value: Value, fp: IO[bytes], indent: int = 0) -> None:
    """
    Writes the dump of a value tree to a binary file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(value, indent))


def print_value(value: Value, indent: int = 0) -> None:
    """
    Writes the dump of a value tree to standard output.

    Goes through ``sys.stdout.buffer`` so string bytes are written unchanged;
    a text-only stdout receives the dump decoded with backslash escapes.
    """
    data = dumps(value, indent)
    stream = sys.stdout
    binary = getattr(stream, "buffer", None)
    if binary is None:
        stream.write(data.decode("utf-8", "backslashreplace"))
        return

    stream.flush()
    binary.write(data)
    binary.flush()


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "INT64_MAX",
    "BDict",
    "BInteger",
    "BList",
    "BString",
    "BencodeDecodeError",
    "BencodeParser",
    "Cursor",
    "ErrorKind",
    "FileReadError",
    "HotPathStats",
    "ParseConfig",
    "ValueKind",
    "clear_hot_path_stats",
    "dump",
    "dumps",
    "get_hot_path_stats",
    "load",
    "loads",
    "parse",
    "print_value",
    "read_file",
    "scan_integer",
]
