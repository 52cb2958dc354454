"""Command-line and console front-end."""
