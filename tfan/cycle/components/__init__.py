"""Component models for the mixed-exhaust turbofan gas path.

Each module exposes pure functions returning small frozen result records;
none of them hold state between calls.
"""
