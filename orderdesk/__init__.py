"""OrderDesk: order management API for a custom fabrication workshop."""

__version__ = "1.0.0"
