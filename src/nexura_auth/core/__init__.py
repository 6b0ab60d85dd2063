"""Core configuration, error taxonomy and security helpers."""
