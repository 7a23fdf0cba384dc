"""
Request-level protections: body size and rate limits.
"""
