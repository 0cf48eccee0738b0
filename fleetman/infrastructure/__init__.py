"""Infrastructure layer - storage adapters and logging."""
