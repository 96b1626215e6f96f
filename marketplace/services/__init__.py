# Services package init
"""
Local Marketplace Backend - Services Layer
===========================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).

Service Inventory:
    - geo: Coordinate, distance_km, find_within_radius (pure, no I/O)
    - ListingService: browse, filter, CRUD and proximity search for listings
    - UserService: registration, login, profile and last-known location
    - MessageService: direct messages between users
    - seed: demo data for local development

Importing this package has no side effects; models import services.geo
directly.
"""
