"""Persistence schema for Starship Commander."""
