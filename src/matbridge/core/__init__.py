"""Type registry, value types and configuration of the conversion engine."""
