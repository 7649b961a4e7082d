"""Infrastructure Layer — persistence gateway and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver-level errors are translated before they leave this package
"""
