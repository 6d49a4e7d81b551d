"""Chat commands loaded by directory scan."""
