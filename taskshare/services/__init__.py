"""Application services: ownership checks first, then the store operation."""
