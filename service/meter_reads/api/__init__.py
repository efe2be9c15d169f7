"""FastAPI application, routers and dependency providers."""
