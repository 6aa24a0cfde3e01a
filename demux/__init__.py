"""Tmux session toolkit: pane queries, session launch, session configs, key help and alert bookkeeping."""

__version__ = "0.1.0"
__all__ = ["help", "keys", "session", "sessions_file", "targets", "tmux"]