"""``paperforge`` subcommand implementations."""
