"""Shared constants used across the application."""

# Form tokens skip visually ambiguous characters (0/O, 1/I)
TOKEN_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TOKEN_LENGTH = 24

# Row caps for the read actions
LIST_LIMIT = 100
POLL_LIMIT = 10

# Integer columns are 32-bit signed in PostgreSQL
MAX_INT = 2**31 - 1
