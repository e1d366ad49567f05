#!/usr/bin/env python3
"""
Main entry point for the saoripng CLI.

This delegates to the UI layer in saoripng.ui.cli to keep the
console script mapping stable.
"""

from saoripng.ui.cli import run as saori_png


if __name__ == "__main__":
    saori_png()
