"""Repository adapters (in-memory and Redis)."""
