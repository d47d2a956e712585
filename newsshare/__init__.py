"""News publishing backend with link-preview rendering."""

__version__ = "0.1.0"
