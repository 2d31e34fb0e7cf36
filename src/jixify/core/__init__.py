"""Core configuration and logging for Jixify."""
