"""Syntax trees, diagnostic rendering and Kindelia and HVM code generation for Kind."""

__version__ = "0.1.0"