"""Plugin hosting and accessory identity for the bridge."""

__version__ = "1.8.0"
