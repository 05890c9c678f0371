"""Selects one ROM per game from No-Intro style collections and arcade Dat files."""

__version__ = "1.1.0"
