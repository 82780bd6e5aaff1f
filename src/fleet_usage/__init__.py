"""
Fleet Usage service.

Tracks which driver is using which automobile over a time interval, with one
open usage per driver at a time.
"""

__version__ = "0.1.0"
