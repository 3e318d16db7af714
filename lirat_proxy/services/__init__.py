"""Cache store, upstream client and the fetch-or-serve logic tying them together."""
