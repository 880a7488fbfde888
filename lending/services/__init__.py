"""Application services orchestrating the domain and the repository."""
