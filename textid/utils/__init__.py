"""textid utilities."""
