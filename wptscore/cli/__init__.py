"""Command-line interface for wptscore."""
