"""
Live broadcast domain logic.

Includes:
- event: Event store, status lifecycle, video sessions, archives and participant tokens.
"""
