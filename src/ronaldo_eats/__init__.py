"""Ronaldo Eats: restaurant discovery, ratings, saved lists and personalized rankings."""

__version__ = "0.1.0"
