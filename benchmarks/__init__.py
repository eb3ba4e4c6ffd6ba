"""
Benchmark suite for bendump decoding performance.

Compares bendump against the bencode.py library (``bencodepy``), which
decodes into plain Python objects and copies every byte string.

Measures parsing speed and memory usage across different document shapes.
"""
