"""Utility helpers shared across sqlfluent."""
