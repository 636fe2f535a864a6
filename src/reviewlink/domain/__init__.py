"""Domain layer: entities, ports, and the review reconciliation services."""
