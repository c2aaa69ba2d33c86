"""Command line interface for covrelay."""
