"""Click-behavior dispatch for entity/component UI worlds."""

__version__ = "0.1.0"
