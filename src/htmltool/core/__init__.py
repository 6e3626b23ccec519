"""Core components: fetching, extraction and orchestration."""
