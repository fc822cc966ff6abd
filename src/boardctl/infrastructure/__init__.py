"""Infrastructure layer: snapshot persistence and the workspace."""
