"""Vitalis patient and clinical record persistence."""

__version__ = "0.1.0"
