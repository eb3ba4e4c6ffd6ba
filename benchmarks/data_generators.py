"""
Test data generators for bencode decoding benchmarks.

Creates various bencoded documents shaped for performance testing:
- Torrent metainfo with a large binary ``pieces`` string
- Large flat lists and dictionaries
- Deeply nested structures
- String-heavy documents with binary payloads
"""

import random
import string
from typing import Any

import bencodepy

# Constants for random data generation
_INT_TYPE = 1
_STRING_TYPE = 2
_BINARY_TYPE = 3
_PIECE_HASH_SIZE = 20


def generate_test_data(data_type: str) -> bytes:
    """Generates bencoded test data based on specified type."""
    generators = {
        "small_torrent": _generate_small_torrent,
        "large_torrent": _generate_large_torrent,
        "mixed_list": _generate_mixed_list,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def _generate_small_torrent() -> bytes:
    """Generates a single-file torrent (< 1KB)."""
    data = {
        "announce": "http://tracker.example.com:6969/announce",
        "created by": "bendump benchmarks",
        "creation date": 1700000000,
        "info": {
            "length": 1_048_576,
            "name": "small.bin",
            "piece length": 262_144,
            "pieces": random.randbytes(_PIECE_HASH_SIZE * 4),
        },
    }
    return bencodepy.encode(data)


def _generate_large_torrent() -> bytes:
    """Generates a multi-file torrent (> 100KB) with many pieces."""
    files = [
        {
            "length": random.randint(1, 1 << 30),
            "path": [_random_string(8), f"{_random_string(12)}.dat"],
        }
        for _ in range(500)
    ]
    data = {
        "announce": "http://tracker.example.com:6969/announce",
        "announce-list": [
            [f"udp://tracker{i}.example.com:1337/announce"] for i in range(10)
        ],
        "comment": _random_string(64),
        "creation date": 1700000000,
        "info": {
            "files": files,
            "name": _random_string(16),
            "piece length": 1 << 20,
            "pieces": random.randbytes(_PIECE_HASH_SIZE * 5000),
        },
    }
    return bencodepy.encode(data)


def _generate_mixed_list() -> bytes:
    """Generates a large list with mixed value types."""
    items: list[Any] = []

    for i in range(2000):
        choice = random.randint(1, 4)
        if choice == _INT_TYPE:
            items.append(random.randint(-(1 << 62), 1 << 62))
        elif choice == _STRING_TYPE:
            items.append(_random_string(random.randint(5, 30)))
        elif choice == _BINARY_TYPE:
            items.append(random.randbytes(random.randint(1, 64)))
        else:
            items.append({"index": i, "value": _random_string(10)})

    return bencodepy.encode(items)


def _generate_nested_structure() -> bytes:
    """Generates a deeply nested dictionary structure."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "data": _random_string(15),
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
            "level": depth,
            "nested": create_nested_dict(depth - 1),
        }

    return bencodepy.encode(create_nested_dict(7))


def _generate_string_heavy() -> bytes:
    """Generates a dictionary of long binary and text strings."""
    data = {
        f"key_{i:04d}": random.randbytes(random.randint(1024, 8192))
        for i in range(200)
    }
    data["text"] = " ".join(_random_string(12) for _ in range(2000))
    return bencodepy.encode(data)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
