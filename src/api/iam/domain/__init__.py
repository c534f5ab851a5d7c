"""Domain layer for the IAM bounded context."""
