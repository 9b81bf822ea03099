"""
7-ELEVEN e-map store locator: coordinate decoding, payload parsing and the
per-region HTTP client.
"""

from .coordinates import normalize_coordinate, normalize_coordinates
from .emap_provider import SevenElevenEmapProvider
from .store_parser import classify_services, parse_store_blocks, parse_stores

__all__ = [
    'normalize_coordinate',
    'normalize_coordinates',
    'SevenElevenEmapProvider',
    'classify_services',
    'parse_store_blocks',
    'parse_stores',
]
