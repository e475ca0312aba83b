"""HTTP API (FastAPI) over the application services."""
