"""Photopick operator CLI."""
