"""Clients for external collaborators (energy-data token issuer)."""
