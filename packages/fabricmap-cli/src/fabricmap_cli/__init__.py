"""fabricmap command line: topology generation, provider introspection and graphs."""
