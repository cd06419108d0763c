"""
Book lending service.

Tracks a collection of books and enforces the available/checked-out
lifecycle through checkout and return operations.
"""

__version__ = "1.0.0"
