"""Pure application services: capability policy, file validation, version grouping."""
