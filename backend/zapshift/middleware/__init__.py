# Middleware package init
"""
zapShift Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: records method, path, status and duration with that ID
    3. GZip / CORS: FastAPI's stock middleware

    Authentication is NOT middleware: only some routes are gated, so the
    Access Gate lives in zapshift.guards as a per-route dependency.
"""
