"""Small shared helpers (timestamps, identifiers)."""
