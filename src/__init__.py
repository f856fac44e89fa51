"""
Partner Ledger - Source Package

Records money received from and given to business partners, persisted to a
single local key-value slot, with per-partner balances and search.

DESIGN PRINCIPLES:
1. Validate before admitting, report every invalid field
2. Edit and delete only after explicit confirmation
3. Never discard stored data silently
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Partner Ledger Team"
