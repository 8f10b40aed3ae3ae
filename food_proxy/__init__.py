"""
FatSecret API proxy.
Caches a client-credentials OAuth token and forwards food images to the
FatSecret image recognition API.
"""

__version__ = "1.0.0"
