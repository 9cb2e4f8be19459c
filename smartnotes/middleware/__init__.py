"""
SmartNotes Backend — Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first, as registered in main.create_app):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → [CORS] → Route Handler

    - Request ID first so every later log line and error body can carry it
    - Logging wraps the rest to time the full request, rejections included
    - Rate Limit only counts POST /api/summarize
"""
