"""Infrastructure adapters (logging, database engine)."""
