"""
Turfboard - multi-tenant on/off turf dashboard API
"""

__version__ = "1.0.0"
