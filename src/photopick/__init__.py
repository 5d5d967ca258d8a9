"""Photopick — client photo selection backed by a Drive folder catalog."""
