"""Small helpers shared across the API."""
