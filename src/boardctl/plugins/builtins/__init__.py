"""Built-in plugins shipped with boardctl."""
