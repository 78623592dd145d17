"""Candidate sources backed by tmux and git."""

from mp_adapters.api import SourceBundle, build_sources

__all__ = ["SourceBundle", "build_sources"]
