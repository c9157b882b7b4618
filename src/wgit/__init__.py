"""wgit: an interactive git workflow assistant."""

__version__ = "0.1.0"
