"""Schema processing and data synthesis engine."""
