"""Location sources that feed the fabricmap topology engine."""
