"""Cross-cutting helpers: errors, logging, caching and health checks."""
