"""Interval reads services: ownership check, windowed query, pivot."""
