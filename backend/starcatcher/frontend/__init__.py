"""pygame presentation layer for the game engine."""
