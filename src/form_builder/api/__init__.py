"""FastAPI backend for schemas, submissions and schema uploads."""
