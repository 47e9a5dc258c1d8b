"""Core configuration, theming and session handling for dirscope."""
