"""DraftDestiny: card collection and catalog data for a sealed-draft simulator."""

__version__ = "0.1.0"
