"""
Grid enumeration, target bookkeeping, and the tick-driven scheduler.

Import from the submodules directly: ``grid``, ``targets``, ``scheduler``.
"""
