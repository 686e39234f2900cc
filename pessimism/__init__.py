"""Identifiers, alert routing, chain clients and HTTP API for blockchain heuristic monitoring."""

__version__ = "0.1.0"