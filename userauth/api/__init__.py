"""HTTP layer - FastAPI application, routes, dependencies and error mapping."""
