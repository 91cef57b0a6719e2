"""Build a container image, push it, and record it as an artifact."""
