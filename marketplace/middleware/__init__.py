# Middleware package init
"""
Local Marketplace Backend - Middleware Package
===============================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Rate limiting runs first so rejected requests cost nothing; the request
    ID is set before logging so every access line carries it.
"""
