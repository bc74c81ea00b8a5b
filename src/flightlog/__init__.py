"""flightlog — flight session reconstruction and concession fee pricing."""

__version__ = "0.1.0"
