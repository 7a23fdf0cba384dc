"""
Account API — canonical application-error model.

Application package root. Every failure the API emits, regardless of
where it originated, reaches the caller as one documented JSON envelope
with a stable numeric ``errno``.

Layers:
    - core: Settings.
    - shared: Cross-cutting concerns (errors, security, logging).
    - interfaces: FastAPI routers, Pydantic schemas.
"""
