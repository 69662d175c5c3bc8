"""Poshik pet shop cart pricing and checkout service"""

__version__ = "1.0.0"
