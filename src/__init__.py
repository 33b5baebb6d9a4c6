# src/__init__.py - v1
"""corpusdigest: checkpointed extract / summarize / translate pipeline for document corpora."""

from corpusdigest.version import __version__

__all__ = ["__version__"]
