"""Command-line inspection of formatter specs."""
