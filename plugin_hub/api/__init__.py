"""HTTP layer: FastAPI app, routers and dependency providers."""
