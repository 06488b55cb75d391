"""Product API: a small CRUD service for products."""

__version__ = "1.0.0"
