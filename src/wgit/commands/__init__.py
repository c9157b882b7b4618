"""Command handlers, one module per git operation."""
