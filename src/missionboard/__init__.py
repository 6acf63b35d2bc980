"""Mission Board: timed missions, daily stickers and reward tiers for kids."""
