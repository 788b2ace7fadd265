"""HTTP API for SimpleDEX."""
