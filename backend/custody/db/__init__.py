"""Database Metadata: the declarative Base shared by all ORM models."""
