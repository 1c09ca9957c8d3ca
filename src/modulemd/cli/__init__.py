"""Command-line interface for modulemd."""
