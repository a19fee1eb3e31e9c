"""
Engine Tests Package
====================
Test suite for the spell-checking engine.

Run all tests: python3 -m pytest tests/engine/ -v
Run specific: python3 -m pytest tests/engine/test_suggest.py -v
"""
