"""
Test suite for the page history engine.

Focus areas:
- Reverse replay correctness (restoration, retroactive correction)
- Aliasing of Line objects across snapshots
- Per-line history builder
- Commit log decoding and file access
- CLI
"""
