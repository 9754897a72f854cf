"""Structure validation rules."""
