"""
Core domain models, money primitives, and invariants.

This module contains the foundational building blocks that are independent
of the turn engine (catalog items, ledger entries, participant state, contracts).
"""
