"""Pop quiz best-of calculator service."""
