"""Rule parameter profiles loaded from YAML."""
