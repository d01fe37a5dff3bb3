"""Types referencing two different classes named Address."""
