"""Stay availability engine for vacation-rental booking inquiries."""

__version__ = "0.1.0"
