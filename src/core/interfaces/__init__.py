"""Interfaces of the core.

- Protocols implemented by the concrete adapters.
- The core depends on these abstractions, never on httpx.
"""
