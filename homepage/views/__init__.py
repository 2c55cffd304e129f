"""Page-level data derived from cached publications and metrics."""
