"""Infrastructure layer: persistence (SQLAlchemy) implementing the application ports."""
