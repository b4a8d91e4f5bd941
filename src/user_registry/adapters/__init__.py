"""Adapters connecting the user registry to HTTP and storage."""
