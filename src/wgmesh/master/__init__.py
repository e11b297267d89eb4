"""Master server: worker registry and mesh orchestration."""
