"""Host integrations for the runner."""
