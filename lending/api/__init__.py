"""HTTP API for the lending service."""
