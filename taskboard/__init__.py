"""
Task Board - single-resource task tracking HTTP API
"""

__version__ = "1.0.0"
