"""Service layer: serialization, snapshots, input resolution and rules."""
