"""
Distributed word frequency counting.
"""

__version__ = "0.1.0"
