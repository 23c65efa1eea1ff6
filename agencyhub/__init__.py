"""agencyhub automation engine."""
