"""
Test suite for the flow ledger

Contains:
- tests/unit/          : Unit tests for individual modules
"""
