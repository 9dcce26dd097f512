"""sortedmultimap CLI — Typer-based command-line interface.

Provides the ``sortedmultimap`` command with subcommands for grouping
JSON-lines records into an encoded multimap, displaying an encoded
multimap, and verifying an encoding's integrity.

All output uses Rich for formatted terminal display.
"""
