"""
Providers Package - External Service Integrations
==================================================

Submodules:
- seven_eleven/: 7-ELEVEN e-map store locator
"""

from .base_provider import BaseDirectoryProvider
from .seven_eleven.emap_provider import SevenElevenEmapProvider

__all__ = ['BaseDirectoryProvider', 'SevenElevenEmapProvider']
