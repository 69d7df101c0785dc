"""Declarative, validated environment variable specifications."""

__version__ = "0.1.0"