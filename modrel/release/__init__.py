"""Release filtering and orchestration."""
