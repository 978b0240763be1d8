"""Domain modules for Starship Commander."""
