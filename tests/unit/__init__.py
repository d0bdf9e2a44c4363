"""
Unit tests for bucket list tracker components.

Storage is either in memory or a moto-mocked DynamoDB table, so the tests
run without network access.
"""
