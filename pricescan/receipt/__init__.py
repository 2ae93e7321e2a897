"""Pure price extraction, enrichment, selection and merging logic."""
