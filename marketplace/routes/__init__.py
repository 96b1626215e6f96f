# Routes package init
"""
Local Marketplace Backend - API Routes Package
===============================================

Route Inventory:
    - health.py:    GET /health
    - users.py:     /api/users, /api/auth/login
    - listings.py:  /api/listings, /api/listings/nearby
    - messages.py:  /api/messages, /api/listings/{id}/messages

Routes stay THIN: parse the request, call a service, shape the response.
"""
