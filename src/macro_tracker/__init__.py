"""Macro tracker: food log storage, summaries and nutrition goals."""
