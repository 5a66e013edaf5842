"""Domain models for heroes, quests and parties."""
