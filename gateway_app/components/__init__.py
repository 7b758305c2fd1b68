"""Layout components for the gateway views."""
