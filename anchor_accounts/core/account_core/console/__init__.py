"""Console entry points for the account core."""
