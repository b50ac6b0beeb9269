"""Chat translator: per-message language detection, translation and summarization."""
