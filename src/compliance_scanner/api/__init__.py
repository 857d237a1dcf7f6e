"""FastAPI application for the compliance analysis backend."""
