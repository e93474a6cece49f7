"""File detection: query building, search-and-verify, state and batching."""
