"""Regras de simulação: modelos, cálculo, alertas e exportação."""
