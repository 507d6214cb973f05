"""API boundary views."""
