"""Compiler from a small Pascal-like language to x86-64 assembly text."""

__version__ = "0.1.0"
__all__ = ["__version__"]