"""Simulation of a migrating cell aggregate made of deformable ellipsoidal cells."""

__version__ = "0.1.0"