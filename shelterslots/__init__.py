"""
Shelter slot normalization and weekly scheduling.
"""

__version__ = "0.1.0"
