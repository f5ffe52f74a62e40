"""Optional framework integrations (install the `web` extra for FastAPI)."""
