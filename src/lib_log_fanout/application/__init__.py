"""Application layer: destination contract, registry, router, and use cases."""
