"""Business logic layer for accounts app (profile image, account removal)."""
