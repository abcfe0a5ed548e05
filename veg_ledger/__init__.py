"""
Vegetable wholesale ledger.

Bills, payments and running party balances for a small vegetable shop,
kept in Firestore and projected into ledger statements and bill history.
"""

__version__ = "0.1.0"
