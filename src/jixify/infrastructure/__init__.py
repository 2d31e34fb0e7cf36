"""Infrastructure layer for Jixify."""
