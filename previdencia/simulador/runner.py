# previdencia/simulador/runner.py
from collections import OrderedDict
from datetime import date, datetime
from threading import Lock
from typing import List, Optional, Tuple, Union

from previdencia.config import settings
from previdencia.logging_config import log
from previdencia.rules_catalog import regras_aplicaveis
from .auditor import gerar_alertas
from .business_logic import avaliar_cenarios
from .data_validation import carregar_draft
from .models import SimulationDraft, SimulationResult
from .timeline import normalizar_timeline

METODOLOGIA_RESUMO = (
    "Tempo e carência contados em meses completos até a DER, com conversão de "
    "tempo especial pelo fator de cada regra. Média aritmética simples das "
    "remunerações desde 07/1994 até o mês anterior à DER; o descarte remove as "
    "menores competências enquanto a média sobe, respeitando o mínimo de meses "
    "de cada regra. RMI = média x coeficiente, limitada ao salário mínimo e ao "
    "teto vigentes na DER."
)


def montar_ders(draft: SimulationDraft) -> List[Tuple[str, date]]:
    dados = draft.basic_data
    ders = [("atual", dados.der)]
    if dados.der_reafirmada is not None:
        ders.append(("reafirmada", dados.der_reafirmada))
    return ders


def evaluate(
    draft: Union[SimulationDraft, dict], gerado_em: Optional[datetime] = None
) -> SimulationResult:
    """Roda a simulação completa de um rascunho.

    Entrada inválida levanta ValidationError antes de qualquer cálculo. O
    `simulacao_id` vem do hash do conteúdo, então o mesmo rascunho (com o
    mesmo `gerado_em`) produz exatamente o mesmo resultado.
    """
    draft = carregar_draft(draft)
    dados = draft.basic_data
    simulacao_id = draft.content_hash()[:16]
    log.info(f"--- INICIANDO SIMULAÇÃO {simulacao_id} (DER {dados.der.isoformat()}) ---")

    timeline = normalizar_timeline(draft.periodos, draft.remuneracoes)
    regras = regras_aplicaveis(dados)
    cenarios = avaliar_cenarios(
        timeline, dados, montar_ders(draft), regras, max_workers=settings.MAX_WORKERS
    )
    alertas = gerar_alertas(draft, timeline, cenarios)

    resultado = SimulationResult(
        simulacao_id=simulacao_id,
        metodologia_resumo=METODOLOGIA_RESUMO,
        alertas=alertas,
        cenarios=cenarios,
        gerado_em=gerado_em or datetime.now(),
    )
    log.success(f"Simulação {simulacao_id} concluída: {len(cenarios)} cenário(s), {len(alertas)} alerta(s).")
    return resultado


class CacheSimulacao:
    """Guarda resultados por hash do rascunho; rascunho alterado gera outra chave.

    Limitado a `max_entradas` resultados (padrão `CACHE_MAX_ENTRADAS`): ao
    passar do limite, sai o resultado consultado há mais tempo.
    """

    def __init__(self, max_entradas: Optional[int] = None):
        self.max_entradas = max_entradas or settings.CACHE_MAX_ENTRADAS
        self._resultados: "OrderedDict[str, SimulationResult]" = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._resultados)

    def __contains__(self, draft: SimulationDraft) -> bool:
        return draft.content_hash() in self._resultados

    def obter(self, draft: Union[SimulationDraft, dict]) -> SimulationResult:
        draft = carregar_draft(draft)
        chave = draft.content_hash()
        with self._lock:
            if chave in self._resultados:
                log.debug(f"Resultado em cache para {chave[:16]}.")
                self._resultados.move_to_end(chave)
                return self._resultados[chave]
        resultado = evaluate(draft)
        with self._lock:
            resultado = self._resultados.setdefault(chave, resultado)
            self._resultados.move_to_end(chave)
            while len(self._resultados) > self.max_entradas:
                antiga, _ = self._resultados.popitem(last=False)
                log.debug(f"Cache cheio: removido {antiga[:16]}.")
            return resultado

    def limpar(self):
        with self._lock:
            self._resultados.clear()
