"""HTTP API for the caption engine (FastAPI)."""
