"""Entry validation rules."""
