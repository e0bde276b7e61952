"""
feedpush.integrations - External Service Integration Layer
============================================================

Adapters for the services a publishing run depends on. Each integration is
abstracted behind an interface so implementations can be swapped (real
service ↔ in-memory).

Sub-packages:
    feed/      - Feed storage transports (memory, local directory, HTTP)
    registry/  - Build-asset registry clients (memory, HTTP)
    issues/    - Issue trackers (memory, GitHub)
"""

__all__: list[str] = []
