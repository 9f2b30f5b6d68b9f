"""Clean stage: parse the cached dataset into a canonical event table."""
