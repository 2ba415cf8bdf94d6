"""Server-rendered task board built with FastAPI, Jinja2 and htmx."""

__version__ = "1.0.0"
