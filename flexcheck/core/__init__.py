"""Core types shared across flexcheck."""
