"""Artifact stores keyed by (document, stage)."""
