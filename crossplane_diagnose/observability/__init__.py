"""Logging setup for crossplane-diagnose."""
