"""Losses, metrics and config-driven pipelines."""
