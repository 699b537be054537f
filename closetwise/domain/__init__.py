"""Domain layer: entities and the interfaces of external collaborators."""
