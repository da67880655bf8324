"""Functional areas of the engine, one sub-package each."""
