"""Storage and client adapters."""
