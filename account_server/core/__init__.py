"""Core configuration, logging and crypto helpers."""
