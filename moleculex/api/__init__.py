"""HTTP API for MoleculeX."""
