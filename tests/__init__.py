"""
Test Suite
==========

Test suite matching the ads_gateway package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP contract tests against the FastAPI application
"""
