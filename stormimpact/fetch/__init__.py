"""Download stage: fetch the raw storm dataset into data/raw/."""
