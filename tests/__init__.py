#!/usr/bin/env python3
"""
Test suite for the eligibility engine.

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v
"""
