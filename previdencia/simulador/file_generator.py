# previdencia/simulador/file_generator.py
import json
from pathlib import Path
from typing import Optional, Union

from previdencia.config import settings
from previdencia.logging_config import log
from .data_validation import carregar_draft
from .models import SimulationDraft


def exportar_draft_json(draft: SimulationDraft) -> str:
    """
    Serializa o rascunho no mesmo formato camelCase que o assistente grava,
    para que possa ser reaberto depois sem perda de informação.
    """
    return json.dumps(draft.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2)


def importar_draft_json(conteudo: Union[str, bytes]) -> SimulationDraft:
    try:
        payload = json.loads(conteudo)
    except json.JSONDecodeError as e:
        log.error(f"Arquivo de rascunho ilegível: {e}")
        raise ValueError(f"JSON inválido: {e.msg} (linha {e.lineno})") from e
    return carregar_draft(payload)


def nome_arquivo_draft(draft: SimulationDraft) -> str:
    return f"simulacao-draft-{draft.updated_at.strftime('%Y%m%dT%H%M%S')}.json"


def salvar_draft_json(draft: SimulationDraft, output_path: Optional[str] = None) -> str:
    pasta = Path(output_path or settings.OUTPUT_DIR)
    pasta.mkdir(parents=True, exist_ok=True)
    caminho = pasta / nome_arquivo_draft(draft)
    caminho.write_text(exportar_draft_json(draft), encoding="utf-8")
    log.success(f"Rascunho salvo em: {caminho}")
    return str(caminho)


def carregar_draft_json(caminho: Union[str, Path]) -> SimulationDraft:
    draft = importar_draft_json(Path(caminho).read_text(encoding="utf-8"))
    log.info(f"Rascunho carregado de {caminho}: {len(draft.periodos)} período(s), {len(draft.remuneracoes)} remuneração(ões).")
    return draft
