"""
Shared helpers: logging/console plumbing and expression rendering.
"""
