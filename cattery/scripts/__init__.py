"""Operational scripts — run with ``python -m cattery.scripts.<name>``."""
