"""Feature services. Each package exposes ``routes.router`` plus the service it wraps."""
