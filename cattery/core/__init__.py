"""Core Layer — domain errors, result types and records. No IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: engines in services/
      orchestrate the transaction, core/ decides what a failure means
"""
