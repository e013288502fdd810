"""
Lookup-table export of solved grid targets.

Provides the logical table and its C header / JSON renderings.
"""

from grippr_sim.export.lookup_table import LookupTable, LookupTableRow

__all__ = ["LookupTable", "LookupTableRow"]
