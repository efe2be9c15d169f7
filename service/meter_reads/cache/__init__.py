"""Redis-backed best-effort caches."""
