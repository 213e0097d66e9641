"""
remedycore: remedy suggestion engine for clinical case documentation.
"""

__version__ = "0.1.0"
