"""Core layer: settings, credential context, domain and input shaping."""
