"""Core business logic — energy math, aggregation, catalogue and stats readers.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework, and the scoring functions perform no I/O.
"""
