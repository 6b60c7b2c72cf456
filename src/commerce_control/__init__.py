"""Shipping webhook receiver, order gate, gateway filter and currency switcher."""

__version__ = "2.0.0"
