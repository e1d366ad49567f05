"""Protocol layer for saoripng.

This package contains the SAORI/1.0 codec (charset, request, response),
the command handlers and configuration loading.
"""

# No exports - import directly from submodules as needed
__all__ = []
