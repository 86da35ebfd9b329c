"""
objstream Command-Line Interface
================================

This package provides the command-line tools for objstream:

- **objparse**: Parse an OBJ file, report statistics, dump events, or
  write a normalized copy

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["objparse"]
