"""Rules engine: character records, items and the systems that act on them."""
