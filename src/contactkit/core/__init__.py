"""Identity resolution core."""
