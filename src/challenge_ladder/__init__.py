"""Challenge Ladder.

Rank competitors on a single strictly-ordered ladder and move positions
through negotiated challenge matches with dual score submission.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
