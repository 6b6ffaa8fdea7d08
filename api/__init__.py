"""HTTP surface for practice sessions."""
