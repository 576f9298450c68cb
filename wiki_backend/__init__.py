"""
Wiki Backend

A FastAPI backend for a community wiki.
Provides article scoring, author rankings, trophies, comments and notifications.
"""

__version__ = "1.0.0"
