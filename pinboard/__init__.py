"""Floor-plan booking tracker: week calendar, interval overlap and pin collision rules."""
