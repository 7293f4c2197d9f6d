"""SACCO member portal core: identity sessions and member data migration."""

__version__ = "0.1.0"
