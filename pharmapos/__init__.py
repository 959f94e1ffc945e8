"""PharmaPOS: point-of-sale and inventory backend for a retail pharmacy."""

__version__ = "1.0.0"
