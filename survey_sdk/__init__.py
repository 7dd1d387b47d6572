"""Engagement-survey engine: question model, completion rules and submission lifecycle."""
