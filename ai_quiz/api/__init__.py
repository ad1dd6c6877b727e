"""HTTP API for quiz generation."""
