"""Pattern validation rules."""
