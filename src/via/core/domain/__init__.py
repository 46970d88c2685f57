"""Domain models and errors.

Pure data: no HTTP, no CLI, no file access.
"""
