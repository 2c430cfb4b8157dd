# Middleware package init
"""
RecipeBox Backend: Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log record
    written while handling the request can carry the same id.
"""
