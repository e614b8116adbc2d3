"""Discord-specific helpers."""
