"""Infrastructure adapters: database, repositories and external clients."""
