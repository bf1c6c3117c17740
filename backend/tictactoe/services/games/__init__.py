"""Game domain services: board evaluation, variants and the session store.

This package contains the pure game mechanics and the authoritative session
store that socket handlers and HTTP routes share, keeping transport concerns
separated from core game logic.
"""
