"""UI adapters for the remote-operation engine."""
