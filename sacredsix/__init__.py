"""Sacred Six API."""
