"""Steps embutidos do ActionFlow."""
