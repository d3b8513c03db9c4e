"""Growth simulators that grow new strokes through the derived fields."""
