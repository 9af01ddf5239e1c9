"""Infrastructure adapters for the catalog ports."""
