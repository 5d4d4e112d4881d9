"""Rules engine and room server for the Startups trading card game."""

__version__ = "1.0.0"
