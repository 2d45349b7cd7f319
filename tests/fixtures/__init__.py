"""
Test fixtures package.

Builders for value objects and aggregates, and test doubles for
handlers and Redis.
"""
