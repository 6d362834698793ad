# previdencia/simulador/data_validation.py
# Garante que o rascunho recebido está no formato esperado antes de qualquer cálculo.
# A estrutura é validada pelo pydantic (os modelos são o "molde" do rascunho) e as
# regras que envolvem mais de um campo são checadas aqui. Qualquer problema vira um
# ValidationError que nomeia o registro ofensor; nada é calculado com entrada inválida.

from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from previdencia.logging_config import log
from .exceptions import ValidationError
from .models import SimulationDraft


def _descrever_local(erro: PydanticValidationError, payload: Any) -> str:
    """Transforma o `loc` do pydantic em algo como "remuneracoes[3] (id=r4).valor"."""
    primeiro = erro.errors()[0]
    partes = []
    atual = payload
    for item in primeiro["loc"]:
        if isinstance(item, int):
            registro_id = None
            if isinstance(atual, list) and item < len(atual) and isinstance(atual[item], dict):
                registro_id = atual[item].get("id")
            partes.append(f"[{item}]" + (f" (id={registro_id})" if registro_id else ""))
            atual = atual[item] if isinstance(atual, list) and item < len(atual) else None
        else:
            partes.append(f".{item}" if partes else str(item))
            atual = atual.get(item) if isinstance(atual, dict) else None
    return "".join(partes) or "draft"


def validar_draft(draft: SimulationDraft) -> SimulationDraft:
    """Checa as invariantes que o pydantic não expressa campo a campo."""
    dados = draft.basic_data

    for indice, periodo in enumerate(draft.periodos):
        if periodo.fim < periodo.inicio:
            registro = f"periodos[{indice}] (id={periodo.id})"
            log.warning(f"Período inválido em {registro}: fim anterior ao início.")
            raise ValidationError(
                f"Fim do período ({periodo.fim.isoformat()}) anterior ao início ({periodo.inicio.isoformat()}).",
                registro=registro,
            )

    if dados.der_reafirmada is not None and dados.der_reafirmada < dados.der:
        raise ValidationError(
            "DER reafirmada não pode ser anterior à DER atual.",
            registro="basicData.derReafirmada",
        )

    if dados.data_nascimento is None and not dados.modo_simplificado:
        raise ValidationError(
            "Data de nascimento obrigatória fora do modo simplificado.",
            registro="basicData.dataNascimento",
        )

    if dados.data_nascimento is not None and dados.data_nascimento > dados.der:
        raise ValidationError(
            "Data de nascimento posterior à DER.",
            registro="basicData.dataNascimento",
        )

    return draft


def carregar_draft(payload: Union[SimulationDraft, dict]) -> SimulationDraft:
    """Aceita um rascunho já montado ou um dicionário (ex.: JSON salvo) e valida."""
    if isinstance(payload, SimulationDraft):
        return validar_draft(payload)

    try:
        draft = SimulationDraft.model_validate(payload)
    except PydanticValidationError as e:
        registro = _descrever_local(e, payload)
        mensagem = e.errors()[0].get("msg", "Registro inválido")
        log.error(f"Erro de validação no rascunho em {registro}: {mensagem}")
        raise ValidationError(mensagem, registro=registro) from e

    return validar_draft(draft)
