"""Trigger a GitHub Actions workflow, correlate its run and optionally wait for the outcome."""
