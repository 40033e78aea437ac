"""
ANTEKHUB FT-UH API client.

Modules:
- antekhub: request executor (`AntekhubClient`)
- resources: endpoint groups (alumni, klaim_alumni, negara, suku, ...)
- payloads: tagged response bodies and the multipart request payload
- errors: client exception hierarchy
- logging_conf: JSON-line logging setup
"""

__all__ = [
    "antekhub",
    "errors",
    "logging_conf",
    "payloads",
    "resources",
]
