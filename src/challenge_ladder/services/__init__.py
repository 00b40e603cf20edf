"""Application services for the challenge ladder."""
