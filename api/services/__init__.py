"""
API Services Layer.

Database-backed operations behind the API endpoints.
"""
