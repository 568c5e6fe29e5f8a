"""Rolegate Enterprise - identity-provider integrations."""
