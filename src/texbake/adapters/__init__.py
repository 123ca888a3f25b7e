"""Adapters bridging texbake to external tools."""
