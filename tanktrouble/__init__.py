"""Game model, maze generation and client-side wire protocol for a maze tank battle game."""

__version__ = "0.1.0"