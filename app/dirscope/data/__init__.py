"""Bundled data files for dirscope."""
