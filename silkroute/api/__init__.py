"""API Layer — FastAPI routers, dependencies, and error handlers for both services."""
