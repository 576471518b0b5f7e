"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, player score repository
- Redis: ranked leaderboard cache, player detail records

No business/cache-aside logic in stores - that belongs in services.
"""
