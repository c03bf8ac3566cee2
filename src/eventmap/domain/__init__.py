"""Domain containers."""
