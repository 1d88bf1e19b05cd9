"""Murmur CLI bootstrap."""

from murmur.cli import app

if __name__ == "__main__":
    app()
