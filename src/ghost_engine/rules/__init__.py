"""Validation rules, one per module, grouped by the document level they check."""
