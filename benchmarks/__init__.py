"""
Benchmark suite for tyson serialization performance.

Compares tyson against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures encoding and decoding speed for typed records and plain payloads.
"""
