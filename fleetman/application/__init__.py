"""Application layer - use cases over the machine aggregate."""
