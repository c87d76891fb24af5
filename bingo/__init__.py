"""Bingo sheets: track reading-challenge progress, share sheets as links."""

__version__ = "0.1.0"
