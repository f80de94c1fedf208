"""Data models for the note graph builder."""
