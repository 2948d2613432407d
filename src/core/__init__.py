"""Core: configuration, domain, contracts and services."""
