"""
Meter interval reads API.

FastAPI service returning a user's hourly energy-meter interval readings
over a trailing one-year window.
"""

__version__ = "0.1.0"
