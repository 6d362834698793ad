# previdencia/simulador/descarte.py
"""
Otimizador do descarte de competências (art. 26, §6º da EC 103/2019).

Descartar a competência de menor valor sempre aumenta (ou mantém) a média do
que sobra, então o melhor conjunto de k descartes é sempre o prefixo dos k
menores valores. Basta varrer k = 0..limite sobre a série ordenada com somas
acumuladas, sem testar subconjuntos.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from previdencia.logging_config import log

# Diferenças de média abaixo disto são empate (vence o menor k)
TOLERANCIA_MEDIA = 1e-9


@dataclass(frozen=True)
class ItemDescarte:
    competencia: str
    valor: float
    descartavel: bool = True


@dataclass(frozen=True)
class ResultadoDescarte:
    descartadas: Tuple[ItemDescarte, ...]
    media_sem_descarte: float
    media_com_descarte: float
    # Média obtida para cada k testado (índice = quantidade descartada)
    medias_por_k: Tuple[float, ...]

    @property
    def quantidade(self) -> int:
        return len(self.descartadas)


def otimizar_descarte(itens: Sequence[ItemDescarte], minimo_restante: int) -> ResultadoDescarte:
    total = len(itens)
    if total == 0:
        return ResultadoDescarte(descartadas=(), media_sem_descarte=0.0, media_com_descarte=0.0, medias_por_k=(0.0,))

    valores = np.array([item.valor for item in itens], dtype=float)
    soma_total = float(valores.sum())
    media_sem = soma_total / total

    candidatos = sorted(
        (item for item in itens if item.descartavel),
        key=lambda item: (item.valor, item.competencia),
    )
    limite = max(0, min(total - max(0, minimo_restante), len(candidatos)))
    if limite == 0:
        return ResultadoDescarte(descartadas=(), media_sem_descarte=media_sem, media_com_descarte=media_sem, medias_por_k=(media_sem,))

    removidos = np.concatenate(([0.0], np.cumsum([item.valor for item in candidatos[:limite]])))
    restantes = total - np.arange(limite + 1)
    medias = (soma_total - removidos) / restantes

    melhor_k = 0
    for k in range(1, limite + 1):
        if medias[k] > medias[melhor_k] + TOLERANCIA_MEDIA:
            melhor_k = k

    log.debug(
        f"Descarte: {total} competência(s), piso {minimo_restante}, "
        f"limite {limite}, melhor k={melhor_k} (média {medias[melhor_k]:.2f})."
    )
    return ResultadoDescarte(
        descartadas=tuple(candidatos[:melhor_k]),
        media_sem_descarte=media_sem,
        media_com_descarte=float(medias[melhor_k]),
        medias_por_k=tuple(float(m) for m in medias),
    )
