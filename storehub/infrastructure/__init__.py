"""Infrastructure: HTTP adapters, session stores and order caches."""
