"""Core Application Layer: Orchestrates use cases and application logic.

Contains the DocumentClient façade and the command handler.
"""
