"""splicefs command line interface."""

from splicefs import __version__

__all__ = ["__version__"]
