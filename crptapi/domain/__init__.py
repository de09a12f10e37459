"""Domain Layer: models, interfaces and errors shared by every other layer."""
