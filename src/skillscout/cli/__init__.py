"""CLI package for skillscout."""
