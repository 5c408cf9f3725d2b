"""Coach agent prompts."""
