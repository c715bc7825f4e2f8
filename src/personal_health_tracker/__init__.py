"""
Personal Health Tracker - Local data store and view layer for health tracking.

Owns daily metrics, an exercise activity log and a list of health tips,
persists them on-device and derives the projections each view renders.
"""

__version__ = "0.1.0"
