"""Envelope construction and JSON rendering helpers."""
