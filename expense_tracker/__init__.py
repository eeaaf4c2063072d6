"""
Expense Tracker - Source Package

A personal expense tracker for a single user recording day-to-day
spending: title, amount, category and when it happened.

DESIGN PRINCIPLES:
1. The ledger is the only source of truth
2. Everything shown is derived from the ledger on every render
3. No silent corrections of user input
4. Every mutation is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
