"""Ponto Geo: geofence-validated time-and-attendance service."""

__version__ = "1.0.0"
