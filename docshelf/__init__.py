"""Offline reference-document library with downloadable language packs."""

__version__ = "0.1.0"
