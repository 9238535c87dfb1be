"""Pure domain computations with no I/O."""
