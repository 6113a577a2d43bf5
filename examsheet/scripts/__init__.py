"""Operational scripts: schema bootstrap and server runner."""
