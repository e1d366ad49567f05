"""SAORI/1.0 image plugin.

Implements the SAORI request/response codec and two commands:
``GET Version`` and ``EXECUTE`` with the ``GetImageType`` and
``ToResizedPng`` sub-operations.
"""

__version__ = "0.1.0"
