"""Core settings, errors and record types."""
