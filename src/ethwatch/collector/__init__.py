"""Interface discovery and counter reading."""
