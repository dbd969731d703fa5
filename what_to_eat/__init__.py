"""
What-to-eat decision service.

Picks one menu item per user per day with a recency-weighted random draw
and keeps a short decision history.
"""

__version__ = "1.0.0"
