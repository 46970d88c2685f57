"""Interfaces (Protocol) implemented by adapters."""
