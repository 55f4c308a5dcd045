"""
Finance Tracker - Source Package

A small personal finance tracker: log in, record income and expenses,
review summaries and export reports.

DESIGN PRINCIPLES:
1. Transactions are immutable once recorded
2. Every figure on screen is derived from the stored list
3. Invalid sessions and corrupt state are treated as absent, never fatal
4. Every significant action is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
