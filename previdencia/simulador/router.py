from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import Response

from previdencia.logging_config import log
from previdencia.rules_catalog import listar_regras
from . import file_generator, report_generator, runner
from .data_validation import carregar_draft
from .exceptions import ValidationError

# --- DEFINIÇÃO DO ROUTER ---
router = APIRouter(prefix="/simulacao/aposentadoria", tags=["Simulação de Aposentadoria"])

# Resultados reaproveitados enquanto o rascunho não muda
cache = runner.CacheSimulacao()


def _erro_validacao(e: ValidationError) -> HTTPException:
    log.warning(f"Rascunho rejeitado: {e}")
    return HTTPException(status_code=422, detail={"registro": e.registro, "mensagem": e.mensagem})


def _anexo(conteudo, media_type: str, nome_arquivo: str) -> Response:
    return Response(
        content=conteudo,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{nome_arquivo}"'},
    )


# --- ENDPOINTS ---


@router.get("/regras")
def get_regras() -> List[Dict[str, Any]]:
    """
    Lista as regras do catálogo, na ordem em que são avaliadas.
    """
    return [
        {
            "id": regra.id,
            "nome": regra.nome,
            "descricao": regra.descricao,
            "carenciaMin": regra.carencia_min,
            "permiteDescarte": regra.permite_descarte,
        }
        for regra in listar_regras()
    ]


@router.post("/avaliar")
def avaliar(draft: Dict[str, Any] = Body(...)):
    try:
        resultado = cache.obter(draft)
    except ValidationError as e:
        raise _erro_validacao(e)
    return resultado.model_dump(mode="json", by_alias=True)


@router.post("/exportar/csv")
def exportar_csv(draft: Dict[str, Any] = Body(...)):
    try:
        resultado = cache.obter(draft)
    except ValidationError as e:
        raise _erro_validacao(e)
    return _anexo(
        report_generator.gerar_csv_resultado(resultado),
        "text/csv; charset=utf-8",
        report_generator.nome_arquivo_csv(resultado),
    )


@router.post("/exportar/pdf")
def exportar_pdf(draft: Dict[str, Any] = Body(...)):
    try:
        resultado = cache.obter(draft)
    except ValidationError as e:
        raise _erro_validacao(e)
    return _anexo(
        report_generator.gerar_pdf_resultado(resultado),
        "application/pdf",
        report_generator.nome_arquivo_pdf(resultado),
    )


@router.post("/exportar/json")
def exportar_json(draft: Dict[str, Any] = Body(...)):
    try:
        modelo = carregar_draft(draft)
    except ValidationError as e:
        raise _erro_validacao(e)
    return _anexo(
        file_generator.exportar_draft_json(modelo),
        "application/json",
        file_generator.nome_arquivo_draft(modelo),
    )
