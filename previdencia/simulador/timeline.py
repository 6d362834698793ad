# previdencia/simulador/timeline.py
"""
Linha do tempo contributiva normalizada.

Junta períodos e remunerações de várias origens (CNIS, contagem, planilha,
digitação manual) numa única sequência ordenada e sem duplicidades:

- períodos são quebrados em trechos elementares; trechos cobertos por mais de
  um período são concomitâncias e recebem status explícito ("ajustado" quando
  algum período foi resolvido manualmente, "pendente" caso contrário);
- remunerações são agrupadas por competência, sinalizadas (zero, abaixo do
  mínimo, acima do teto) e as duplicadas colapsam num único registro.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Sequence, Tuple

from previdencia.logging_config import log
from previdencia.shared.lookup_data import obter_salario_minimo, obter_teto_inss
from .models import (
    CONFIANCA_FONTE,
    Categoria,
    Fonte,
    MotivoInconsistencia,
    PeriodoContribuicao,
    Remuneracao,
    StatusConcomitancia,
)

UM_DIA = timedelta(days=1)


@dataclass(frozen=True)
class PeriodoNormalizado:
    inicio: date
    fim: date
    categoria: Categoria
    indicador_carencia: bool
    fonte: Fonte
    status_concomitancia: StatusConcomitancia
    periodo_id: str  # período que prevaleceu no trecho
    origens: Tuple[str, ...]  # todos os períodos que cobrem o trecho

    @property
    def concomitante(self) -> bool:
        return len(self.origens) > 1


@dataclass(frozen=True)
class RemuneracaoNormalizada:
    competencia: str
    data_competencia: date
    valor: float
    fonte: Fonte
    origem_id: str
    inconsistente: bool
    motivos: Tuple[MotivoInconsistencia, ...]
    descartavel: bool
    duplicada: bool


@dataclass(frozen=True)
class Timeline:
    periodos: Tuple[PeriodoNormalizado, ...]
    remuneracoes: Tuple[RemuneracaoNormalizada, ...]
    competencias_duplicadas: Tuple[str, ...] = ()

    @property
    def concomitancias(self) -> Tuple[PeriodoNormalizado, ...]:
        return tuple(p for p in self.periodos if p.concomitante)

    @property
    def concomitancias_pendentes(self) -> Tuple[PeriodoNormalizado, ...]:
        return tuple(
            p for p in self.concomitancias
            if p.status_concomitancia == StatusConcomitancia.PENDENTE
        )


# --- PERÍODOS ---


def _resolver_trecho(
    cobertura: List[Tuple[int, PeriodoContribuicao]]
) -> Tuple[int, PeriodoContribuicao, StatusConcomitancia]:
    """Escolhe o período que vale no trecho e o status da concomitância."""
    if len(cobertura) == 1:
        indice, periodo = cobertura[0]
        return indice, periodo, periodo.status_concomitancia or StatusConcomitancia.OK

    ajustados = [(i, p) for i, p in cobertura if p.resolvido_manualmente]
    if ajustados:
        indice, periodo = ajustados[-1]
        return indice, periodo, StatusConcomitancia.AJUSTADO

    # Sem resolução manual: vale o período importado por último (melhor esforço)
    indice, periodo = cobertura[-1]
    return indice, periodo, StatusConcomitancia.PENDENTE


def normalizar_periodos(periodos: Sequence[PeriodoContribuicao]) -> Tuple[PeriodoNormalizado, ...]:
    if not periodos:
        return ()

    fronteiras = sorted({p.inicio for p in periodos} | {p.fim + UM_DIA for p in periodos})
    resultado: List[PeriodoNormalizado] = []
    ultimo_vencedor = None

    for inicio, proximo in zip(fronteiras, fronteiras[1:]):
        fim = proximo - UM_DIA
        cobertura = [(i, p) for i, p in enumerate(periodos) if p.inicio <= inicio and p.fim >= fim]
        if not cobertura:
            ultimo_vencedor = None
            continue

        indice, vencedor, status = _resolver_trecho(cobertura)
        origens = tuple(p.id for _, p in cobertura)

        anterior = resultado[-1] if resultado else None
        if (
            anterior is not None
            and ultimo_vencedor == indice
            and anterior.fim + UM_DIA == inicio
            and anterior.status_concomitancia == status
            and anterior.origens == origens
        ):
            resultado[-1] = PeriodoNormalizado(
                inicio=anterior.inicio,
                fim=fim,
                categoria=anterior.categoria,
                indicador_carencia=anterior.indicador_carencia,
                fonte=anterior.fonte,
                status_concomitancia=status,
                periodo_id=anterior.periodo_id,
                origens=origens,
            )
            continue

        resultado.append(
            PeriodoNormalizado(
                inicio=inicio,
                fim=fim,
                categoria=vencedor.categoria_efetiva,
                indicador_carencia=vencedor.indicador_carencia,
                fonte=vencedor.fonte,
                status_concomitancia=status,
                periodo_id=vencedor.id,
                origens=origens,
            )
        )
        ultimo_vencedor = indice

    return tuple(resultado)


# --- REMUNERAÇÕES ---


def sinalizar_remuneracao(remuneracao: Remuneracao) -> Tuple[MotivoInconsistencia, ...]:
    """Motivos informados na importação somados aos detectados aqui."""
    motivos = list(remuneracao.motivos_inconsistencia)
    data = remuneracao.data_competencia

    if remuneracao.valor == 0:
        motivos.append(MotivoInconsistencia.VALOR_ZERO)
    else:
        minimo = obter_salario_minimo(data)
        teto = obter_teto_inss(data)
        if minimo is not None and remuneracao.valor < minimo:
            motivos.append(MotivoInconsistencia.ABAIXO_MINIMO)
        if teto is not None and remuneracao.valor > teto:
            motivos.append(MotivoInconsistencia.ACIMA_TETO)

    return tuple(dict.fromkeys(motivos))


def normalizar_remuneracoes(
    remuneracoes: Sequence[Remuneracao],
) -> Tuple[Tuple[RemuneracaoNormalizada, ...], Tuple[str, ...]]:
    grupos: Dict[str, List[Tuple[int, Remuneracao, Tuple[MotivoInconsistencia, ...]]]] = {}
    for indice, rem in enumerate(remuneracoes):
        grupos.setdefault(rem.competencia, []).append((indice, rem, sinalizar_remuneracao(rem)))

    normalizadas: List[RemuneracaoNormalizada] = []
    duplicadas: List[str] = []

    for competencia in sorted(grupos):
        candidatos = grupos[competencia]
        duplicada = len(candidatos) > 1
        limpos = [c for c in candidatos if not c[1].inconsistente and not c[2]]

        if limpos:
            # A importação mais recente entre os registros sem sinalização
            _, escolhido, motivos = limpos[-1]
            inconsistente = False
        else:
            _, escolhido, motivos = max(
                candidatos, key=lambda c: (CONFIANCA_FONTE[c[1].fonte], c[0])
            )
            inconsistente = True
            if duplicada:
                motivos = tuple(dict.fromkeys(motivos + (MotivoInconsistencia.DUPLICADO,)))

        if duplicada:
            duplicadas.append(competencia)

        normalizadas.append(
            RemuneracaoNormalizada(
                competencia=competencia,
                data_competencia=escolhido.data_competencia,
                valor=escolhido.valor,
                fonte=escolhido.fonte,
                origem_id=escolhido.id,
                inconsistente=inconsistente,
                motivos=motivos,
                descartavel=escolhido.descartavel,
                duplicada=duplicada,
            )
        )

    return tuple(normalizadas), tuple(duplicadas)


def normalizar_timeline(
    periodos: Sequence[PeriodoContribuicao], remuneracoes: Sequence[Remuneracao]
) -> Timeline:
    periodos_normalizados = normalizar_periodos(periodos)
    remuneracoes_normalizadas, duplicadas = normalizar_remuneracoes(remuneracoes)
    timeline = Timeline(
        periodos=periodos_normalizados,
        remuneracoes=remuneracoes_normalizadas,
        competencias_duplicadas=duplicadas,
    )

    pendentes = len(timeline.concomitancias_pendentes)
    log.debug(
        f"Linha do tempo: {len(periodos_normalizados)} trecho(s), "
        f"{len(remuneracoes_normalizadas)} competência(s), {pendentes} concomitância(s) pendente(s)."
    )
    return timeline
