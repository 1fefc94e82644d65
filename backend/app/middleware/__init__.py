# Middleware package init
"""
Murmur Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (last added in create_app runs first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit: rejects over-quota clients before anything else runs
    2. Request ID: assigns the correlation id used by log lines and error handlers
    3. Logging: one access line per request with status and duration

    Responses travel the chain in reverse, so the X-Request-ID header and the
    access log line see the final status code.
"""
