"""Persistence layer: SQLAlchemy models and per-user repositories."""
