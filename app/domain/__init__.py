"""
Domain layer containing core business logic and domain services.

Submodules:
- admin: Admin accounts paired with identity-provider users.
- live: Broadcast events (store, lifecycle, sessions, archives, tokens).
- utils: Domain-specific utilities (e.g., ID generation).
"""
