"""Domain layer for the user registry."""
