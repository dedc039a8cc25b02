"""
Python client for the notelens HTTP API.
"""

from notelens.client.api import APIClientError, NotelensClient

__all__ = ["APIClientError", "NotelensClient"]
