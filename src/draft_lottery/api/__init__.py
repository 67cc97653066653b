"""HTTP API for the draft lottery."""
