"""Adapters: I/O towards the Jira and Tempo REST APIs (httpx)."""
