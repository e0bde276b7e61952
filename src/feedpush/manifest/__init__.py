"""
feedpush.manifest - Build Manifest Input
==========================================

Reads the build manifest (XML asset manifest or YAML/JSON document) into
the BuildManifest model.

Usage:
    from feedpush.manifest import load_manifest, parse_manifest
"""

from feedpush.manifest.parser import load_manifest, parse_manifest

__all__ = ["load_manifest", "parse_manifest"]
