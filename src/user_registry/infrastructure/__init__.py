"""Infrastructure: configuration, logging and dependency wiring."""
