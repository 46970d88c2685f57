"""Core: domain, contract resolution, configuration.

Nothing in here performs network or file I/O.
"""
