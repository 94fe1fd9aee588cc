"""Core publishing logic: validation, edit transactions and rollback."""
