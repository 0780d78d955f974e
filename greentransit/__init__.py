"""
Green Transit backend.

Trip ledger, gamification engine and campus route recommendation for a
single commuter. See `greentransit.main` for the HTTP surface.
"""

__version__ = "0.1.0"
