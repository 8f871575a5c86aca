"""Spaced-repetition trainer for the 104 katakana."""
