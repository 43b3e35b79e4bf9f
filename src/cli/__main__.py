"""Allows `python -m cli ...` during development."""

from cli.main import run

run()
