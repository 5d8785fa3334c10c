"""
Ads Tools Gateway
=================

HTTP facade exposing a health check, Server-Sent-Events heartbeat streams and a
tool execution endpoint that proxies campaign and insights operations into the
Facebook Marketing API.

This package provides:
- FastAPI endpoints for health, SSE streams and tool execution
- A pluggable ads backend (in-memory mock or live SDK)
- Structured logging and environment-based configuration
"""

__version__ = "1.0.0"
