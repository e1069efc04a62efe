"""
Command-line tools for the reflection token and treasury planner.

Run `python -m reflection.cli.tool --help` (or the `reflection` console
script) for the available commands.
"""
