"""Infrastructure adapters (database, in-memory stores)."""
