"""Input and output adapters around the orchestration core."""
