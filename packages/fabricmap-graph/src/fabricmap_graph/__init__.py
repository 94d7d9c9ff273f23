"""Graphviz rendering of fabricmap switch trees."""
