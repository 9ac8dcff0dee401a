"""Leaderboard domain services.

Store operations live here so HTTP routes and socket handlers stay thin
transport wrappers.
"""
