"""Import services: binding, orchestration, progress and summary output."""
