"""Client-side session core for the clinic marketplace."""

__version__ = "0.1.0"
