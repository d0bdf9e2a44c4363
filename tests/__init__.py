"""
Test package for the bucket list tracker.

Test Organization:
    unit/: Unit tests for models, stores, statistics and the API handler
    conftest.py: Pytest configuration and shared fixtures
"""
