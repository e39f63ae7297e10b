"""Core building blocks: settings and database search infrastructure."""
