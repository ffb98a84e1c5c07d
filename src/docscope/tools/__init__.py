"""Documentation and code search tools."""
