"""Requisition lifecycle and candidate-routing core."""

__version__ = "0.1.0"
