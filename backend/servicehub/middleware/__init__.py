"""
ServiceHub Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit: rejects over-limit callers before any processing
    2. Request ID: correlation id for logs and the X-Request-ID header
    3. Logging: access line with status and duration, tagged with the request id
    4. GZip / CORS: applied by Starlette's stock middleware
"""
