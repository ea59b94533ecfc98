"""Terminal presentation: formatters and view models (no rendering)."""
