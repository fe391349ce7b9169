"""CLI subcommand parsers and handlers for mrd."""
