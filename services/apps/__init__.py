"""App integrations and their static definitions."""
