"""Adapters implementing the covrelay ports."""
