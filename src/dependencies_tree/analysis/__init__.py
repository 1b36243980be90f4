"""Graph consolidation: node model, lookup tables, world builder and projections."""
