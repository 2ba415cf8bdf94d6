"""HTTP layer: routers, rendering and error handling."""
