"""Validation services."""
