"""Database access: connection scope and statement executors."""
