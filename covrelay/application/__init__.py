"""
Application layer for covrelay.

Report assembly rules, CI and coverage-service tables, and the send use case.
"""
