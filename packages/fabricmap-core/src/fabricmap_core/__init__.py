"""Topology graph construction and scheduler serialization."""
