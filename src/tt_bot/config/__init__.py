"""Configuration schema and loading for TT Bot."""
