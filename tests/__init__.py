"""
Test suite for the draft turn engine

Contains:
- tests/unit/          : Unit tests for domain models, gates, ordering, ledger, scheduler, engine
"""
