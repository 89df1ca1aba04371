"""Stages uploaded files locally and forwards them to an object store."""

__version__ = "1.0.0"
