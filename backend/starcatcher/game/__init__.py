"""Client-side game engine: entities, spawning, the per-frame loop, the
level clock and the session state machine.

Nothing in here touches a window or the network directly. Rendering goes
through a renderer object and leaderboard traffic through
``starcatcher.client.LeaderboardClient``, so the whole engine can be driven
from tests with synthetic time.
"""
