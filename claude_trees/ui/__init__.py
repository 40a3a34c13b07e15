"""Textual screens and widgets for claude-trees."""
