"""
Service layer: query, seed and view-shaping logic behind the routes.
"""
