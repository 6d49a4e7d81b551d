"""Bundled command and event listener modules."""
