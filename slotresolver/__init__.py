"""
Availability resolution engine for bookable business time slots.
"""

__version__ = "0.1.0"
