"""
Schemas module - Request/Response schemas for API endpoints.

Wire format is camelCase; see schemas.py.
"""
