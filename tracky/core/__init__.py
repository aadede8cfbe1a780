"""Core logic: timeline grouping, view state, server client and session."""
