"""
Live viewer for the grid solve.

Provides a Pygame window that shows frames rendered by ``ArmTableEnv``
with a heads-up display of the solve progress.
"""
