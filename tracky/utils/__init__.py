"""Utility helpers for tracky."""
