"""Domain layer - key layout, sequence derivation and pointer rules."""
