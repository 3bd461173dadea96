"""Headless orchestration between the oracle, the resolver and the UI."""
