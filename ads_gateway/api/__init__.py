"""
FastAPI Endpoints
=================

HTTP access to the gateway.

Endpoints:
- GET /health: Health check endpoint
- GET /sse, GET /test-sse: Time event streams
- GET /v1/tools: Tool heartbeat stream
- POST /v1/tools: Tool execution
"""
