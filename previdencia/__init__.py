"""Simulador previdenciário: elegibilidade, carência e RMI com descarte."""

__version__ = "1.0.0"
