"""Benchmark Energy MCP Server.

Ask your AI how your aim trainer benchmark is going — per-scenario ranks,
energy, subcategory aggregates and overall rank for each difficulty.
"""

__version__ = "0.1.0"
