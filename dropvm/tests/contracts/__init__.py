"""Small contracts used by the dropvm host tests."""
