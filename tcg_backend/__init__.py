"""Proxy for the JustTCG pricing API with card image fallbacks."""

from . import images, justtcg, pricing, providers

__all__ = ["images", "justtcg", "pricing", "providers"]
