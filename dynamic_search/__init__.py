"""Dynamic full-text search over SQLAlchemy models backed by PostgreSQL."""

__version__ = "0.1.0"
