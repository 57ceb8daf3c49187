"""Network-facing HTTP clients."""

from regulated_assets.network.base import BaseHTTPClient
from regulated_assets.network.horizon import HorizonClient, requires_authorization

__all__ = ["BaseHTTPClient", "HorizonClient", "requires_authorization"]
