"""Entry point for ``python -m search_terminal``."""

from search_terminal.cli.commands import app

if __name__ == "__main__":
    app()
