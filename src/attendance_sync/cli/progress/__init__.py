"""CLI progress displays."""
