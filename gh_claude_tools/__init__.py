"""Git and GitHub workflow commands powered by the claude CLI."""
