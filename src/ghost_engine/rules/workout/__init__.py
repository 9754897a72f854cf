"""Workout validation rules."""
