"""Services Layer — the cat and user lifecycle engines.

Invariants:
    - Each multi-step operation runs inside exactly one gateway transaction
    - Every public engine method returns an Outcome
"""
