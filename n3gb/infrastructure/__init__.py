"""Cross-cutting infrastructure."""
