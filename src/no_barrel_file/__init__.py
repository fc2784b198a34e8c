"""Rewrite barrel-file imports into direct imports of the defining modules."""

__version__ = "0.1.0"
