"""
Pytest configuration and shared fixtures for bendump tests.

Provides immutable test data fixtures shared by the decoding, failure and
dump test modules.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import bendump


@dataclass(frozen=True)
class BencodeTestCase:
    """
    Immutable container for bencode test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: bytes
    should_fail: bool = False
    expected_output: Any = None
    expected_kind: bendump.ErrorKind | None = None
    expected_pos: int = 0


TORRENT_DOC = (
    b"d"
    b"8:announce35:http://tracker.example.com/announce"
    b"13:announce-listll35:http://tracker.example.com/announceee"
    b"7:comment12:test torrent"
    b"10:created by13:bendump tests"
    b"13:creation datei1700000000e"
    b"4:info"
    b"d"
    b"5:filesl"
    b"d6:lengthi1024e4:pathl5:a.txteed6:lengthi2048e4:pathl3:dir5:b.bineee"
    b"4:name7:example"
    b"12:piece lengthi32768e"
    b"6:pieces20:" + bytes(range(20)) + b"e"
    b"e"
)


@pytest.fixture
def torrent_doc() -> bytes:
    """
    Provides a multi-file torrent metainfo document.

    Exercises nested dictionaries, lists of dictionaries and a binary
    ``pieces`` string containing NUL and control bytes.
    """
    return TORRENT_DOC


@pytest.fixture
def bencode_fail_cases() -> list[BencodeTestCase]:
    """
    Provides bencode documents that must fail decoding.

    Each case names the failure kind and the byte offset the error must
    report.
    """
    kind = bendump.ErrorKind
    cases = [
        ("empty input", b"", kind.END_OF_INPUT, 0),
        ("unterminated list", b"l4:spam", kind.UNTERMINATED_COMPOSITE, 0),
        ("truncated string", b"5:abc", kind.MALFORMED_STRING, 0),
        ("integer key", b"di5eei5ee", kind.INVALID_DICTIONARY_KEY, 1),
        (
            "2**64 overflows",
            b"i18446744073709551616e",
            kind.INTEGER_OVERFLOW,
            1,
        ),
        ("negative zero", b"i-0e", kind.MALFORMED_INTEGER, 1),
        ("empty integer", b"ie", kind.MALFORMED_INTEGER, 1),
        ("bare minus", b"i-e", kind.MALFORMED_INTEGER, 1),
        ("missing integer end", b"i42", kind.END_OF_INPUT, 3),
        ("non-digit in integer", b"i4x2e", kind.MALFORMED_INTEGER, 2),
        ("unknown leading byte", b"x", kind.UNKNOWN_LEADING_BYTE, 0),
        ("bad string separator", b"4-spam", kind.MALFORMED_INTEGER, 1),
        ("dict missing value", b"d3:cow", kind.END_OF_INPUT, 6),
        (
            "unterminated dict",
            b"d3:cow3:moo",
            kind.UNTERMINATED_COMPOSITE,
            0,
        ),
        ("lone list start", b"l", kind.UNTERMINATED_COMPOSITE, 0),
        ("lone dict start", b"d", kind.UNTERMINATED_COMPOSITE, 0),
        ("lone end marker", b"e", kind.UNKNOWN_LEADING_BYTE, 0),
        ("lone integer start", b"i", kind.END_OF_INPUT, 1),
        ("missing string bytes", b"3:", kind.MALFORMED_STRING, 0),
        ("missing string colon", b"12", kind.END_OF_INPUT, 2),
        ("junk inside list", b"l4:spamxe", kind.UNKNOWN_LEADING_BYTE, 7),
        ("list as key", b"dli1ee1:ae", kind.INVALID_DICTIONARY_KEY, 1),
    ]

    return [
        BencodeTestCase(
            description=description,
            input_data=doc,
            should_fail=True,
            expected_kind=expected_kind,
            expected_pos=expected_pos,
        )
        for description, doc, expected_kind, expected_pos in cases
    ]


@pytest.fixture
def basic_bencode_values() -> list[BencodeTestCase]:
    """
    Provides basic bencode values with their plain Python equivalents.

    Covers every node variant and the empty containers.
    """
    return [
        BencodeTestCase("string", b"4:spam", False, b"spam"),
        BencodeTestCase("empty string", b"0:", False, b""),
        BencodeTestCase("integer", b"i42e", False, 42),
        BencodeTestCase("negative integer", b"i-3e", False, -3),
        BencodeTestCase("zero", b"i0e", False, 0),
        BencodeTestCase(
            "list", b"l4:spam4:eggse", False, [b"spam", b"eggs"]
        ),
        BencodeTestCase("empty list", b"le", False, []),
        BencodeTestCase(
            "dictionary",
            b"d3:cow3:moo4:spam4:eggse",
            False,
            {b"cow": b"moo", b"spam": b"eggs"},
        ),
        BencodeTestCase("empty dictionary", b"de", False, {}),
        BencodeTestCase(
            "nested",
            b"d4:listl5:apple6:bananai42ee3:numi7ee",
            False,
            {b"list": [b"apple", b"banana", 42], b"num": 7},
        ),
    ]
