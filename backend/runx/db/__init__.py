"""Declarative Base shared by every ORM model and by Alembic autogenerate."""
