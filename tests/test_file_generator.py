# tests/test_file_generator.py

import json
from datetime import datetime
from pathlib import Path

import pytest

from previdencia.simulador.exceptions import ValidationError
from previdencia.simulador.file_generator import (
    carregar_draft_json,
    exportar_draft_json,
    importar_draft_json,
    nome_arquivo_draft,
    salvar_draft_json,
)


def test_ida_e_volta_sem_perda(draft_padrao):
    # Act
    conteudo = exportar_draft_json(draft_padrao)
    recarregado = importar_draft_json(conteudo)
    # Assert
    assert recarregado == draft_padrao
    assert recarregado.content_hash() == draft_padrao.content_hash()


def test_json_usa_camel_case(draft_padrao):
    # Act
    payload = json.loads(exportar_draft_json(draft_padrao))
    # Assert
    assert "basicData" in payload
    assert "dataNascimento" in payload["basicData"]
    assert "indicadorCarencia" in payload["periodos"][0]
    assert payload["updatedAt"] == "2024-05-20T08:30:00"


def test_hash_nao_depende_do_updated_at(draft_padrao):
    # Arrange
    outro = draft_padrao.model_copy(update={"updated_at": datetime(2030, 1, 1)})
    # Act & Assert
    assert outro.content_hash() == draft_padrao.content_hash()


def test_hash_muda_com_o_conteudo(draft_padrao, criar_draft):
    # Arrange
    outro = criar_draft(basic_data={"sexo": "masculino"})
    # Act & Assert
    assert outro.content_hash() != draft_padrao.content_hash()


def test_json_ilegivel():
    with pytest.raises(ValueError, match="JSON inválido"):
        importar_draft_json("{ nao e json")


def test_json_com_registro_invalido():
    # Arrange
    conteudo = json.dumps({"basicData": {"der": "2024-13-01"}})
    # Act & Assert
    with pytest.raises(ValidationError) as erro:
        importar_draft_json(conteudo)
    assert erro.value.registro == "basicData.der"


def test_salvar_e_carregar_do_disco(draft_padrao, tmp_path: Path):
    # Act
    caminho = salvar_draft_json(draft_padrao, output_path=str(tmp_path))
    recarregado = carregar_draft_json(caminho)
    # Assert
    assert Path(caminho).name == nome_arquivo_draft(draft_padrao) == "simulacao-draft-20240520T083000.json"
    assert recarregado == draft_padrao
