"""Dynamic pricing and market aggregation for resale inventory."""

__version__ = "0.1.0"
