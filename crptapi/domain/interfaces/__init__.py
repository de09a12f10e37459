"""Interfaces (Abstract Base Classes) for the collaborators the core depends on."""
