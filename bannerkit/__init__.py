"""Banner animation timeline engine and ad-network packaging."""

__version__ = "0.1.0"
