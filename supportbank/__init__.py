"""
SupportBank - Source Package

A small-business ledger that imports transaction files (CSV, JSON, XML),
keeps accounts with balances derived from double-entry transactions,
and exports the ledger back to disk.

DESIGN PRINCIPLES:
1. Balances are derived, never stored
2. Bad records are skipped loudly, bad files are rejected whole
3. No silent corrections
4. Every import decision is auditable
5. Audit storage is swappable
"""

__version__ = "1.0.0"
__author__ = "SupportBank Team"
