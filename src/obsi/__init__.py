"""obsi - Obsidian vault CLI and terminal UI with AI-assisted commands."""

__version__ = "0.3.0"
