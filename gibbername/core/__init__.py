"""Cross-cutting HTTP plumbing."""
