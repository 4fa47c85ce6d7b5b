#!/usr/bin/env python3
"""
Test suite for the personalization engine.

    # Run all tests
    python -m pytest tests/ -v

    # Skip the longer fuzz checks
    python -m pytest tests/ -v -m "not slow"

    # Using unittest (TestCase-based modules only)
    python -m unittest discover tests -v

Shared factories live in tests/factories.py; pytest fixtures in tests/conftest.py.
"""
