"""subspacectl — isolated pnpm workspaces for Rush subspaces."""

__version__ = "0.1.0"
