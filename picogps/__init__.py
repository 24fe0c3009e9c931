"""Decode NMEA sentences from a serial GPS receiver."""

__version__ = "0.1.0"