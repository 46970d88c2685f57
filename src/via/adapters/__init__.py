"""Adapters: everything that performs I/O (HTTP, files)."""
