"""Utility helpers for the document service."""
