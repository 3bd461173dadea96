"""Domain core: state, seed data and the turn resolver (no UI, no LLM)."""

API_VERSION = "core-vm1-20261018"
