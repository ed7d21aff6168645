"""HTTP API exposing the checkout tools."""

from agentcheckout.api.app import create_app

__all__ = ["create_app"]
