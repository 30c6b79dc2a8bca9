"""REST API - HTTP surface over the Shipyard engine."""

from shipyard.api.app import create_app

__all__ = ["create_app"]
