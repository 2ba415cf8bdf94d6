"""Route modules registered by ``taskboard.main``."""

from taskboard.api.routers import auth, boards, health, tasks

__all__ = ["auth", "boards", "health", "tasks"]
