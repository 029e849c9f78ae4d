"""Hinged - record keeping and gap analysis for stamp collections."""

from hinged._version import __version__

__all__ = ["__version__"]
