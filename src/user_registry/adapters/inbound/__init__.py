"""Inbound adapters for the User Registry.

Provides the REST API adapter exposing user CRUD over HTTP.
"""

from user_registry.adapters.inbound.rest_api import create_app

__all__ = ["create_app"]
