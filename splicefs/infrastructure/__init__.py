"""Infrastructure layer: logging, locking, console output and filesystem access."""
