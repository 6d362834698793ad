"""
Módulo de consulta de dados históricos oficiais para cálculos previdenciários.

Fornece valores de salário mínimo e teto do INSS por competência, usados
para sinalizar remunerações fora dos limites legais e para limitar a RMI.
A série começa em 07/1994 (Plano Real), início do período básico de cálculo.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple


# Formato: {ano: [(mes_inicio, valor), ...]}
# O valor vale a partir de mes_inicio até o próximo reajuste (inclusive em anos seguintes).
HISTORICO_SALARIO_MINIMO: Dict[int, List[Tuple[int, float]]] = {
    1994: [(7, 64.79), (9, 70.00)],
    1995: [(5, 100.00)],
    1996: [(5, 112.00)],
    1997: [(5, 120.00)],
    1998: [(5, 130.00)],
    1999: [(5, 136.00)],
    2000: [(4, 151.00)],
    2001: [(4, 180.00)],
    2002: [(4, 200.00)],
    2003: [(4, 240.00)],
    2004: [(5, 260.00)],
    2005: [(5, 300.00)],
    2006: [(4, 350.00)],
    2007: [(4, 380.00)],
    2008: [(3, 415.00)],
    2009: [(2, 465.00)],
    2010: [(1, 510.00)],
    2011: [(1, 540.00), (3, 545.00)],
    2012: [(1, 622.00)],
    2013: [(1, 678.00)],
    2014: [(1, 724.00)],
    2015: [(1, 788.00)],
    2016: [(1, 880.00)],
    2017: [(1, 937.00)],
    2018: [(1, 954.00)],
    2019: [(1, 998.00)],
    2020: [(1, 1039.00), (2, 1045.00)],
    2021: [(1, 1100.00)],
    2022: [(1, 1212.00)],
    2023: [(1, 1302.00), (5, 1320.00)],
    2024: [(1, 1412.00)],
    2025: [(1, 1518.00)],
}


# Histórico do Teto do INSS (limite máximo do salário de contribuição e do benefício)
HISTORICO_TETO_INSS: Dict[int, List[Tuple[int, float]]] = {
    1994: [(7, 582.86)],
    1995: [(5, 832.66)],
    1996: [(5, 957.56)],
    1997: [(6, 1031.87)],
    1998: [(6, 1081.50), (12, 1200.00)],
    1999: [(6, 1255.32)],
    2000: [(6, 1328.25)],
    2001: [(6, 1430.00)],
    2002: [(6, 1561.56)],
    2003: [(6, 1869.34)],
    2004: [(1, 2400.00), (5, 2508.72)],
    2005: [(5, 2668.15)],
    2006: [(4, 2801.56)],
    2007: [(4, 2894.28)],
    2008: [(3, 3038.99)],
    2009: [(2, 3218.90)],
    2010: [(1, 3467.40)],
    2011: [(1, 3691.74)],
    2012: [(1, 3916.20)],
    2013: [(1, 4159.00)],
    2014: [(1, 4390.24)],
    2015: [(1, 4663.75)],
    2016: [(1, 5189.82)],
    2017: [(1, 5531.31)],
    2018: [(1, 5645.80)],
    2019: [(1, 5839.45)],
    2020: [(1, 6101.06)],
    2021: [(1, 6433.57)],
    2022: [(1, 7087.22)],
    2023: [(1, 7507.49), (5, 7786.02)],
    2024: [(1, 7786.02)],
    2025: [(1, 8157.41)],
}


def _valor_vigente(
    historico: Dict[int, List[Tuple[int, float]]], data_competencia: date
) -> Optional[float]:
    ano = data_competencia.year
    mes = data_competencia.month

    # Anos futuros sem dados usam o último valor conhecido
    ultimo_ano_conhecido = max(historico.keys())
    if ano > ultimo_ano_conhecido:
        return historico[ultimo_ano_conhecido][-1][1]

    # Percorre do ano pedido para trás até achar o reajuste vigente
    for ano_busca in range(ano, min(historico.keys()) - 1, -1):
        for mes_inicio, valor in reversed(historico.get(ano_busca, [])):
            if ano_busca < ano or mes >= mes_inicio:
                return valor

    # Antes de 07/1994 não há série
    return None


def obter_salario_minimo(data_competencia: date) -> Optional[float]:
    """
    Retorna o salário mínimo vigente na competência, ou None antes de 07/1994.

    Exemplo:
        >>> obter_salario_minimo(date(2023, 3, 1))
        1302.0
        >>> obter_salario_minimo(date(2023, 7, 15))
        1320.0
        >>> obter_salario_minimo(date(2011, 2, 1))
        540.0
    """
    return _valor_vigente(HISTORICO_SALARIO_MINIMO, data_competencia)


def obter_teto_inss(data_competencia: date) -> Optional[float]:
    """
    Retorna o teto do INSS vigente na competência, ou None antes de 07/1994.

    Exemplo:
        >>> obter_teto_inss(date(2023, 2, 1))
        7507.49
        >>> obter_teto_inss(date(2024, 6, 1))
        7786.02
    """
    return _valor_vigente(HISTORICO_TETO_INSS, data_competencia)


def limitar_rmi(rmi: float, data_competencia: date) -> float:
    """Mantém a RMI entre o salário mínimo e o teto vigentes na DER."""
    salario_minimo = obter_salario_minimo(data_competencia)
    teto_inss = obter_teto_inss(data_competencia)

    if salario_minimo is not None and rmi < salario_minimo:
        return salario_minimo
    if teto_inss is not None and rmi > teto_inss:
        return teto_inss
    return rmi
