"""HTTP server for flowspec."""
