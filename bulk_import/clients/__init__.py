"""
Backend API client.
"""

from .api_client import ApiClient, ApiError, ResourceClient

__all__ = [
    "ApiClient",
    "ApiError",
    "ResourceClient",
]
