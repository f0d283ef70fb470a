"""Service layer: vote aggregation, comment ranking, topics and karma."""
