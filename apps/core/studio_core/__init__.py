"""Content Studio core — models, generation client, URL extraction and history."""
