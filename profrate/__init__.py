"""Annotate course schedule instructor names with crowd-sourced ratings."""

__version__ = "0.1.0"
