"""HTTP surface: FastAPI app, routes, pages."""
