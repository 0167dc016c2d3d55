"""Concrete backends for the memory's collaborator interfaces."""
