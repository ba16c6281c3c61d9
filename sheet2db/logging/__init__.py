"""Application logging setup and error log."""
