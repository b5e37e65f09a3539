"""Utility modules for gitscope."""
