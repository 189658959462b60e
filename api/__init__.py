"""HTTP API for camp registration sessions."""
