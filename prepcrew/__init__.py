"""Interview preparation crew gateway."""
