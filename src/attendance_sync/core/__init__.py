"""Core synchronization engine and its adapters."""
