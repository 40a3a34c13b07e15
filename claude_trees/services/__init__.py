"""Services for claude-trees."""
