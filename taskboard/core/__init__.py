"""Core domain: models, store, validation and sessions."""
