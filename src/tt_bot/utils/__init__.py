"""Utility packages for TT Bot."""
