"""Deterministic turn resolution engine for ring-and-sector orbital combat."""
