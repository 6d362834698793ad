# previdencia/simulador/business_logic.py

import math
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from previdencia.logging_config import log
from previdencia.rules_catalog import CATALOG, RegraBeneficio
from previdencia.shared.lookup_data import limitar_rmi
from previdencia.shared.utils import arredondar_moeda
from .carencia import calcular_carencia, calcular_tempo_contribuicao, calcular_tempo_em_categorias
from .descarte import ItemDescarte, otimizar_descarte
from .models import Categoria, CenarioResultado, CompetenciaDescartada, DadosBasicos, RegraResultado
from .timeline import RemuneracaoNormalizada, Timeline

# Início da série de salários considerada no cálculo da média (Plano Real)
INICIO_PERIODO_BASICO = date(1994, 7, 1)


def idade_na_der(data_nascimento: Optional[date], der: date) -> Optional[int]:
    if data_nascimento is None:
        return None
    return relativedelta(der, data_nascimento).years


def janela_remuneracoes(timeline: Timeline, der: date) -> Tuple[RemuneracaoNormalizada, ...]:
    """Competências de 07/1994 até o mês anterior à DER, sem valores zerados."""
    mes_der = der.replace(day=1)
    return tuple(
        r for r in timeline.remuneracoes
        if INICIO_PERIODO_BASICO <= r.data_competencia < mes_der and r.valor > 0
    )


def calcular_rmi(media: float, coeficiente: float, der: date) -> float:
    if media <= 0:
        return 0.0
    return arredondar_moeda(limitar_rmi(media * coeficiente, der))


def _tempo_categoria_exigido(
    regra: RegraBeneficio, timeline: Timeline, der: date, sexo: str
) -> Tuple[int, int, Categoria]:
    """Meses na categoria exigida, mínimo aplicável e categoria de referência.

    A referência é a categoria com mais meses (empate: a de menor exigência,
    que vem primeiro no catálogo). Sem tempo algum, vale a primeira.
    """
    exigencia = regra.tempo_categoria
    meses_por_categoria = [
        (calcular_tempo_em_categorias(timeline, der, [categoria]), -indice, categoria)
        for indice, categoria in enumerate(exigencia.categorias)
    ]
    referencia = max(meses_por_categoria)[2]
    meses = calcular_tempo_em_categorias(timeline, der, exigencia.categorias, exigencia.fatores)
    return meses, exigencia.minimo_meses[referencia].para(sexo), referencia


def verificar_requisitos(
    regra: RegraBeneficio, timeline: Timeline, dados: DadosBasicos, der: date
) -> Tuple[List[str], int, int]:
    """Devolve (motivos de inelegibilidade, tempo total, carência) para a regra na DER."""
    sexo = dados.sexo
    fatores = regra.fatores_para(sexo)
    tempo_total = calcular_tempo_contribuicao(timeline, der, fatores)
    carencia = calcular_carencia(timeline, der, fatores)
    tempo_min = regra.tempo_min_meses.para(sexo)
    motivos: List[str] = []

    if carencia < regra.carencia_min:
        motivos.append(f"Carência insuficiente: {carencia} de {regra.carencia_min} meses")
    if tempo_total < tempo_min:
        motivos.append(f"Tempo de contribuição insuficiente: {tempo_total} de {tempo_min} meses")

    if regra.idade_min is not None or regra.pontos is not None:
        idade = idade_na_der(dados.data_nascimento, der)
        if idade is None:
            motivos.append("Data de nascimento não informada")
        else:
            if regra.idade_min is not None and idade < regra.idade_min.para(sexo):
                motivos.append(f"Idade mínima não atingida: {idade} de {regra.idade_min.para(sexo)} anos")
            if regra.pontos is not None:
                exigidos = regra.pontos.exigidos(der, sexo)
                obtidos = idade + tempo_total // 12
                if obtidos < exigidos:
                    motivos.append(f"Pontuação insuficiente: {obtidos} de {exigidos} pontos")

    if regra.pedagio is not None:
        pedagio = regra.pedagio
        tempo_corte = calcular_tempo_contribuicao(timeline, pedagio.data_corte, fatores)
        faltante = max(0, tempo_min - tempo_corte)
        if faltante > pedagio.faltante_maximo_meses:
            motivos.append(
                f"Em {pedagio.data_corte.strftime('%d/%m/%Y')} faltavam {faltante} meses "
                f"(máximo {pedagio.faltante_maximo_meses})"
            )
        else:
            exigido = tempo_min + math.ceil(faltante * pedagio.percentual)
            if tempo_total < exigido:
                motivos.append(f"Pedágio não cumprido: {tempo_total} de {exigido} meses")

    if regra.tempo_categoria is not None:
        meses, minimo, _ = _tempo_categoria_exigido(regra, timeline, der, sexo)
        if meses < minimo:
            motivos.append(f"{regra.tempo_categoria.descricao} insuficiente: {meses} de {minimo} meses")

    return motivos, tempo_total, carencia


def avaliar_regra(
    regra: RegraBeneficio, timeline: Timeline, dados: DadosBasicos, der: date
) -> RegraResultado:
    motivos, tempo_total, carencia = verificar_requisitos(regra, timeline, dados, der)
    elegivel = not motivos

    janela = janela_remuneracoes(timeline, der)
    media_sem = sum(r.valor for r in janela) / len(janela) if janela else 0.0
    coeficiente = regra.coeficiente.calcular(tempo_total, dados.sexo)
    rmi_sem = calcular_rmi(media_sem, coeficiente, der)

    rmi_com = rmi_sem
    descartadas: List[CompetenciaDescartada] = []
    # Regras inelegíveis não passam pelo otimizador; a RMI fica só informativa
    if elegivel and regra.permite_descarte and janela:
        itens = [ItemDescarte(r.competencia, r.valor, r.descartavel) for r in janela]
        resultado = otimizar_descarte(itens, regra.piso_descarte(dados.sexo))
        if resultado.quantidade:
            rmi_com = calcular_rmi(resultado.media_com_descarte, coeficiente, der)
            descartadas = [
                CompetenciaDescartada(competencia=item.competencia, valor=item.valor)
                for item in sorted(resultado.descartadas, key=lambda item: item.competencia)
            ]

    return RegraResultado(
        regra_id=regra.id,
        nome=regra.nome,
        elegivel=elegivel,
        motivo_nao_elegivel="; ".join(motivos) if motivos else None,
        tempo_total_meses=tempo_total,
        carencia_meses=carencia,
        carencia_exigida=regra.carencia_min,
        rmi_sem_descarte=rmi_sem,
        rmi_com_descarte=rmi_com,
        competencias_descartadas=descartadas,
        ganho_estimado=arredondar_moeda(rmi_com - rmi_sem),
        descarte_aplicavel=bool(descartadas),
    )


def selecionar_melhor_opcao(resultados: Sequence[RegraResultado]) -> Optional[RegraResultado]:
    ordem = {regra_id: indice for indice, regra_id in enumerate(CATALOG)}
    elegiveis = [r for r in resultados if r.elegivel]
    if not elegiveis:
        return None
    return min(
        elegiveis,
        key=lambda r: (-r.rmi_com_descarte, r.carencia_exigida, ordem.get(r.regra_id, len(ordem))),
    )


def avaliar_cenarios(
    timeline: Timeline,
    dados: DadosBasicos,
    ders: Sequence[Tuple[str, date]],
    regras: Sequence[RegraBeneficio],
    max_workers: int = 1,
) -> List[CenarioResultado]:
    """Avalia todas as regras em todas as DERs.

    Com `max_workers` > 1 os pares (DER, regra) rodam num pool de threads; a
    montagem final segue sempre a ordem (DER, catálogo).
    """
    pares = [(der_tipo, der, regra) for der_tipo, der in ders for regra in regras]

    if max_workers > 1 and len(pares) > 1:
        log.debug(f"Avaliando {len(pares)} par(es) DER x regra com {max_workers} worker(s).")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futuros = [executor.submit(avaliar_regra, regra, timeline, dados, der) for _, der, regra in pares]
            resultados = [futuro.result() for futuro in futuros]
    else:
        resultados = [avaliar_regra(regra, timeline, dados, der) for _, der, regra in pares]

    cenarios: List[CenarioResultado] = []
    por_cenario = len(regras)
    for posicao, (der_tipo, der) in enumerate(ders):
        resultados_cenario = resultados[posicao * por_cenario:(posicao + 1) * por_cenario]
        melhor = selecionar_melhor_opcao(resultados_cenario)
        elegiveis = sum(1 for r in resultados_cenario if r.elegivel)
        log.info(
            f"Cenário {der_tipo} (DER {der.isoformat()}): {elegiveis} de {len(resultados_cenario)} regra(s) elegível(is)."
        )
        cenarios.append(
            CenarioResultado(der_tipo=der_tipo, der=der, resultados=resultados_cenario, melhor_opcao=melhor)
        )
    return cenarios
