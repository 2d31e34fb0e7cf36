"""External service integrations: email delivery and completions."""
