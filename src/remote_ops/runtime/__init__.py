"""Runtime services (telemetry) shared by every engine layer."""
