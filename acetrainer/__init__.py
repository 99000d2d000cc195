"""
acetrainer: exam-preparation progress tracker and timed training engine.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
