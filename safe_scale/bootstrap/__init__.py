"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so the CLI and the
application layer can depend on ports without importing adapters directly.
"""
