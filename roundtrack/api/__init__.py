"""HTTP surface for the round tracking engine."""
