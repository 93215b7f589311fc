"""Core functionality for stories: agents, storage, config and the runner."""
