"""
Shared constants and small stateless helpers for the grippr_sim package.
"""
