# previdencia/simulador/auditor.py
# Alertas consultivos sobre a qualidade dos dados e dos resultados.
# Nenhum alerta bloqueia o cálculo: eles só apontam o que merece revisão manual.

from typing import List, Optional, Sequence, Set

from previdencia.config import settings
from previdencia.shared.utils import formatar_data_br, meses_entre_competencias
from .business_logic import janela_remuneracoes
from .models import CenarioResultado, SimulationDraft
from .timeline import Timeline

# ==============================================================================
# ORDEM FIXA DOS ALERTAS
# concomitâncias > duplicidades > inconsistências > cenários sem regra >
# divergência do descarte > ausências de dados > lacunas > dados pessoais
# ==============================================================================


def _alertas_concomitancia(timeline: Timeline) -> List[str]:
    alertas = []
    for trecho in timeline.concomitancias_pendentes:
        alertas.append(
            f"Concomitância não resolvida entre os períodos {', '.join(trecho.origens)} "
            f"({formatar_data_br(trecho.inicio)} a {formatar_data_br(trecho.fim)}): "
            f"usado o período {trecho.periodo_id}; revise manualmente."
        )
    return alertas


def _descartadas_em_todas(cenario: CenarioResultado) -> Set[str]:
    """Competências que todas as regras elegíveis do cenário descartaram."""
    elegiveis = [r for r in cenario.resultados if r.elegivel]
    if not elegiveis:
        return set()
    conjuntos = [{c.competencia for c in r.competencias_descartadas} for r in elegiveis]
    return set.intersection(*conjuntos)


def _alertas_inconsistencias(timeline: Timeline, cenarios: Sequence[CenarioResultado]) -> List[str]:
    usadas = {}
    for cenario in cenarios:
        descartadas = _descartadas_em_todas(cenario)
        for remuneracao in janela_remuneracoes(timeline, cenario.der):
            if remuneracao.inconsistente and remuneracao.competencia not in descartadas:
                usadas[remuneracao.competencia] = remuneracao
    if not usadas:
        return []

    detalhes = ", ".join(
        f"{competencia} ({'/'.join(m.value for m in usadas[competencia].motivos) or 'sinalizada'})"
        for competencia in sorted(usadas)
    )
    return [f"{len(usadas)} remuneração(ões) inconsistente(s) entraram no cálculo: {detalhes}."]


def _alertas_divergencia(cenarios: Sequence[CenarioResultado], limiar: float) -> List[str]:
    alertas = []
    for cenario in cenarios:
        for resultado in cenario.resultados:
            if not resultado.descarte_aplicavel or resultado.rmi_sem_descarte <= 0:
                continue
            diferenca = (resultado.rmi_com_descarte - resultado.rmi_sem_descarte) / resultado.rmi_sem_descarte
            if diferenca > limiar:
                alertas.append(
                    f"{resultado.nome} (cenário {cenario.der_tipo}): RMI com descarte {diferenca:.0%} "
                    f"acima da RMI sem descarte; confira as competências descartadas."
                )
    return alertas


def _alertas_lacunas(timeline: Timeline, limiar: int) -> List[str]:
    alertas = []
    for anterior, seguinte in zip(timeline.periodos, timeline.periodos[1:]):
        lacuna = meses_entre_competencias(anterior.fim, seguinte.inicio)
        if lacuna > limiar:
            alertas.append(
                f"Lacuna de {lacuna} meses sem contribuição entre "
                f"{formatar_data_br(anterior.fim)} e {formatar_data_br(seguinte.inicio)}."
            )
    return alertas


def gerar_alertas(
    draft: SimulationDraft,
    timeline: Timeline,
    cenarios: Sequence[CenarioResultado],
    limiar_divergencia: Optional[float] = None,
    limiar_lacuna: Optional[int] = None,
) -> List[str]:
    if limiar_divergencia is None:
        limiar_divergencia = settings.LIMIAR_DIVERGENCIA_DESCARTE
    if limiar_lacuna is None:
        limiar_lacuna = settings.LIMIAR_LACUNA_MESES
    dados = draft.basic_data

    alertas = _alertas_concomitancia(timeline)

    if timeline.competencias_duplicadas:
        alertas.append(
            "Competências com mais de um registro (mantido um por competência): "
            f"{', '.join(timeline.competencias_duplicadas)}."
        )

    alertas += _alertas_inconsistencias(timeline, cenarios)

    for cenario in cenarios:
        if not any(r.elegivel for r in cenario.resultados):
            alertas.append(
                f"Nenhuma regra elegível no cenário {cenario.der_tipo} (DER {formatar_data_br(cenario.der)})."
            )

    alertas += _alertas_divergencia(cenarios, limiar_divergencia)

    if not draft.remuneracoes:
        alertas.append("Nenhuma remuneração informada: a RMI não pôde ser calculada.")
    if not draft.periodos:
        alertas.append("Nenhum período contributivo informado.")
    if dados.modo_simplificado:
        alertas.append("Modo simplificado ativo: resultados aproximados, confirme os dados antes de protocolar.")

    alertas += _alertas_lacunas(timeline, limiar_lacuna)

    if dados.sexo not in ("feminino", "masculino"):
        alertas.append("Sexo não informado: aplicados os parâmetros masculinos (mais exigentes).")
    if dados.data_nascimento is None:
        alertas.append("Data de nascimento não informada: regras com requisito de idade ficam inelegíveis.")

    return alertas
