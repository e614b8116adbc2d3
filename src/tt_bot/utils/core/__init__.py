"""Core utilities: exceptions and error handling."""
