"""Outer surfaces for the engine: terminal game loop and REST API."""
