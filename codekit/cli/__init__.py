"""Command-line interface for codekit."""
