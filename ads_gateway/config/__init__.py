"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Immutable application settings and vendor credentials
- logging: Structured logging configuration
"""
