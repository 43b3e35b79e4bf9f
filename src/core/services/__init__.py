"""Application services (input shaping for the CLI)."""
