# previdencia/simulador/carencia.py
"""
Cálculo de carência e de tempo de contribuição em meses.

Convenção de contagem: trechos contíguos da mesma categoria são reunidos
numa única sequência antes da contagem, de modo que a quebra da linha do
tempo em concomitâncias não altera o total. Cada sequência conta meses
completos entre o início e o dia seguinte ao fim (relativedelta); dias que
sobram são truncados. Trechos que ultrapassam a DER contam só até a DER.

Conversão de tempo especial: o fator vem da regra avaliada (catálogo), nunca
daqui. Os meses convertidos são somados em Decimal e só o total é truncado,
ex.: 12 meses x 1,2 = 14,4 -> 14. Períodos de pessoa com deficiência contam
sempre pela duração integral.
"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from previdencia.shared.utils import meses_inteiros
from .models import Categoria
from .timeline import PeriodoNormalizado, Timeline

Fatores = Mapping[Categoria, float]
Sequencia = Tuple[date, date, Categoria]

UM_DIA = timedelta(days=1)


def sequencias_continuas(
    timeline: Timeline,
    der: date,
    filtro: Callable[[PeriodoNormalizado], bool] = lambda p: True,
) -> List[Sequencia]:
    """Reúne trechos aceitos pelo filtro, colados e da mesma categoria, limitados à DER."""
    sequencias: List[List] = []
    for periodo in timeline.periodos:
        if not filtro(periodo) or periodo.inicio > der:
            continue
        fim = min(periodo.fim, der)
        if (
            sequencias
            and sequencias[-1][2] == periodo.categoria
            and sequencias[-1][1] + UM_DIA == periodo.inicio
        ):
            sequencias[-1][1] = fim
        else:
            sequencias.append([periodo.inicio, fim, periodo.categoria])
    return [tuple(s) for s in sequencias]


def _fator(categoria: Categoria, fatores: Optional[Fatores]) -> Decimal:
    if not fatores or not categoria.especial:
        return Decimal(1)
    return Decimal(str(fatores.get(categoria, 1)))


def _somar_meses(
    timeline: Timeline,
    der: date,
    fatores: Optional[Fatores],
    filtro: Callable[[PeriodoNormalizado], bool],
) -> int:
    total = Decimal(0)
    for inicio, fim, categoria in sequencias_continuas(timeline, der, filtro):
        meses = meses_inteiros(inicio, fim)
        if meses:
            total += _fator(categoria, fatores) * meses
    return int(total.to_integral_value(rounding=ROUND_FLOOR))


def calcular_carencia(timeline: Timeline, der: date, fatores: Optional[Fatores] = None) -> int:
    """Meses de carência até a DER (só períodos com indicador de carência)."""
    return _somar_meses(timeline, der, fatores, lambda p: p.indicador_carencia)


def calcular_tempo_contribuicao(
    timeline: Timeline, der: date, fatores: Optional[Fatores] = None
) -> int:
    """Tempo total de contribuição em meses até a DER, com ou sem indicador de carência."""
    return _somar_meses(timeline, der, fatores, lambda p: True)


def calcular_tempo_em_categorias(
    timeline: Timeline,
    der: date,
    categorias: Iterable[Categoria],
    fatores: Optional[Fatores] = None,
) -> int:
    """Meses somados apenas nas categorias pedidas (ex.: todas as especiais)."""
    aceitas = set(categorias)
    return _somar_meses(timeline, der, fatores, lambda p: p.categoria in aceitas)


def calcular_tempo_por_categoria(timeline: Timeline, der: date) -> Dict[Categoria, int]:
    """Meses sem conversão, por categoria; base das regras especial e PcD."""
    tempos = {categoria: 0 for categoria in Categoria}
    for inicio, fim, categoria in sequencias_continuas(timeline, der):
        tempos[categoria] += meses_inteiros(inicio, fim)
    return tempos
