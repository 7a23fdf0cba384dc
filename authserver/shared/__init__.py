"""
Shared module package.

Contains cross-cutting concerns:
- Canonical error taxonomy, translation and HTTP mapping
- Request size limiting and rate limiting
- Logging configuration
"""
