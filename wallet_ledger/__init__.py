"""
Wallet Ledger - Source Package

Historical balance reconstruction and Physical/Logical reconciliation
for a personal finance tracker.

DESIGN PRINCIPLES:
1. Balances are replayed, never stored
2. Same input → same output, bit for bit
3. One bad record never breaks a report
4. A discrepancy is a finding, not an error
5. The ledger source is read-only and swappable
"""

__version__ = "1.0.0"
__author__ = "Wallet Ledger Team"
