"""Validation and compilation engine."""
