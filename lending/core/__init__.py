"""Cross-cutting concerns: configuration, logging and result values."""
