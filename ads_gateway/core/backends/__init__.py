"""
Ads Backends
============

Pluggable campaign and insights backends behind the ``AdsBackend`` interface.

Implementations:
- MockAdsBackend: in-memory campaigns with synthetic insights
- LiveAdsBackend: Facebook Marketing API through the facebook_business SDK
"""

from typing import TYPE_CHECKING

from .base import AdsBackend
from .mock import MockAdsBackend

if TYPE_CHECKING:
    from ads_gateway.config.settings import Settings


def create_backend(settings: "Settings") -> AdsBackend:
    """Build the backend selected by ``settings.ads_backend``."""
    if settings.ads_backend == "mock":
        return MockAdsBackend()

    from .live import LiveAdsBackend

    return LiveAdsBackend(settings)


__all__ = ["AdsBackend", "MockAdsBackend", "create_backend"]
