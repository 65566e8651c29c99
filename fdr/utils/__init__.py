"""Utility helpers for the feed digest reader."""
