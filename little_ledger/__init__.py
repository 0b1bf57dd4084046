"""
Little Ledger - Source Package

A minimal personal finance ledger: one balance per named account,
every deposit and withdrawal kept as an immutable transaction, and
account state stored as JSON between runs.

DESIGN PRINCIPLES:
1. Money is integer cents, never floats
2. The history always explains the balance
3. A failed save never corrupts a good file
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Little Ledger Team"
