"""Core presentation-facing logic.

Subpackages:
- reporting: ledger summaries for display
"""
__all__ = ["reporting"]
