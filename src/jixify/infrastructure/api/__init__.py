"""HTTP API for Jixify."""
