"""Domain layer for Jixify: entities, errors, ports and the account lifecycle."""
