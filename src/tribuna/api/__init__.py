"""HTTP API for Tribuna."""
