"""Business logic for the accounts service."""
