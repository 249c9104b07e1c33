"""Aggregated statistics for dashboards and the platform admin API."""
