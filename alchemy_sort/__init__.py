"""
Alchemy Sort - rules engine and level generator for a pour sort puzzle.
"""

__version__ = "0.1.0"
