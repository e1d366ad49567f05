"""Command line interface for saoripng."""
