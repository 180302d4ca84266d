"""BoardSiege — dice-driven board traversal with wave defense battles."""

__version__ = "0.1.0"
