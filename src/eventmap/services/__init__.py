"""Event and ordering services used by the container."""
