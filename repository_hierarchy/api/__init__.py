"""Web API serving repository hierarchies and EAD downloads."""

from repository_hierarchy.api.app import create_app

__all__ = ["create_app"]
