"""
Benchmark suite for jslit literal encoding performance.

Compares jslit in JSON mode against standard JSON encoders including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures encoding speed and memory usage across different data types.
"""
