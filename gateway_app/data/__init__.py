"""Backend access for the gateway views."""
