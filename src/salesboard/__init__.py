"""
Sales task tracker.

Keeps an in-memory collection of sales tasks and derives ROI, efficiency and a
performance grade from it, plus a deterministic ranked view.
"""

__version__ = "0.1.0"
