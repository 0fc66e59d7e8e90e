"""Postbox - posts, users and refresh tokens in a single JSON document"""

__version__ = "1.0.0"
