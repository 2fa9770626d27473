"""Neonsheet: derived stats, equipment rules and abilities for cyberpunk tabletop character sheets."""

__version__ = "0.1.0"
