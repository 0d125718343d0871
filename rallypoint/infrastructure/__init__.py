"""Infrastructure layer: persistence, push delivery and change propagation."""
