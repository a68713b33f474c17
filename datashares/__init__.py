"""Namespaced 512-byte shares: split transactions and blobs into shares and parse them back."""

__version__ = "0.1.0"