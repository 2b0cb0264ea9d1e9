"""
Plugin manifest for the Bitte assistant platform.
"""

from .plugin import PluginManifestProvider, build_manifest
from .validation import validate_manifest

__all__ = ["PluginManifestProvider", "build_manifest", "validate_manifest"]
