"""Adapters connecting the domain to storage and transport."""
