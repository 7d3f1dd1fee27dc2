"""Application layer: ports and hook use cases."""
