"""MoleculeX domain sync layer."""

__version__ = "1.0.0"
