"""Story Relay API: stories, relays and likes behind cookie-based JWT auth."""
