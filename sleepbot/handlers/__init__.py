"""Telegram handlers for the survey conversation."""
