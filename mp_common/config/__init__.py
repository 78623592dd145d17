"""Configuration helpers for muxpick."""
