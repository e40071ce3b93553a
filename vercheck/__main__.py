"""Entry point for running vercheck as a module.

This allows running the application with:
    python -m vercheck [OPTIONS] COMMAND [ARGS]
"""

from vercheck.cli import app

if __name__ == "__main__":
    app()
