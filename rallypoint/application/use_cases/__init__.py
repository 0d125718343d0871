"""Use cases exposed to the API, the scheduler and scripts."""
