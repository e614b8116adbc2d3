"""Command extensions (cogs) loaded at startup."""
