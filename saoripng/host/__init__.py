"""Host adapter for saoripng.

- SaoriPlugin: load / request / unload surface for a host process
- configure_logging: one-time logging setup for entry points
"""

from saoripng.host.plugin import SaoriPlugin, configure_logging

__all__ = [
    "SaoriPlugin",
    "configure_logging",
]
