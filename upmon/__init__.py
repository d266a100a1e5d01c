"""Monitor UPower devices over D-Bus and print property changes as lines."""

__version__ = "0.1.0"
