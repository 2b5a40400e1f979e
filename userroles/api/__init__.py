"""HTTP adapter: FastAPI routers over the directory service."""
