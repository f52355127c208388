"""Solo session manager for the Colonial Twilight board game."""

__version__ = "0.1.0"
