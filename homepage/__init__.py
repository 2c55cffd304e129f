"""Data layer for a personal academic homepage."""
