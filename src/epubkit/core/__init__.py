"""EPUB parsing and generation pipeline."""
