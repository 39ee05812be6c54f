"""Metrix Draft - rating-weighted draft wheel for Disc Golf Metrix competitions."""

__version__ = "0.1.0"
