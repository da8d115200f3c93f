"""Infrastructure adapters for the remote backing store."""
