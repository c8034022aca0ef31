"""
Domain Layer

This package contains business logic organized by domain area.
Domain services implement core algorithms and should not directly
handle external I/O (handlers and the CLI do that).

Domains:
- schema: XSD schema graph loading and metadata tree resolution
"""
