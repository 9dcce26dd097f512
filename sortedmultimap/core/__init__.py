"""Core data structures: comparators, ordered primitives, the multimap, views, codec."""
