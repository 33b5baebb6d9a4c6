"""Shared models and error taxonomy."""
