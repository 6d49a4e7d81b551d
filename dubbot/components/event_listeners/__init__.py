"""Event listeners loaded by directory scan."""
