"""Operational scripts (migrations, database bootstrap, seeding, tokens)."""
