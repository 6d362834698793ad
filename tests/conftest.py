# tests/conftest.py

from datetime import date, datetime

import pytest

from previdencia.simulador.models import (
    DadosBasicos,
    PeriodoContribuicao,
    Remuneracao,
    SimulationDraft,
)


def competencias(inicio_ano: int, inicio_mes: int, quantidade: int):
    ano, mes = inicio_ano, inicio_mes
    for _ in range(quantidade):
        yield f"{ano:04d}-{mes:02d}"
        mes += 1
        if mes > 12:
            ano, mes = ano + 1, 1


def criar_remuneracoes_padrao():
    # 200 competências a partir de 01/2007: 10 de R$ 1.000 seguidas de 190 de R$ 2.000
    remuneracoes = []
    for indice, competencia in enumerate(competencias(2007, 1, 200)):
        remuneracoes.append(
            Remuneracao(id=f"r{indice}", competencia=competencia, valor=1000.0 if indice < 10 else 2000.0)
        )
    return remuneracoes


def criar_draft_teste(**dados) -> SimulationDraft:
    """Segurada de 64 anos com 233 meses de contribuição comum até a DER 01/06/2024."""
    basicos = {
        "sexo": "feminino",
        "data_nascimento": date(1960, 1, 1),
        "der": date(2024, 6, 1),
    }
    basicos.update(dados.pop("basic_data", {}))
    campos = {
        "basic_data": DadosBasicos(**basicos),
        "periodos": [PeriodoContribuicao(id="p1", inicio=date(2005, 1, 1), fim=date(2024, 5, 31))],
        "remuneracoes": criar_remuneracoes_padrao(),
        "updated_at": datetime(2024, 5, 20, 8, 30, 0),
    }
    campos.update(dados)
    return SimulationDraft(**campos)


@pytest.fixture
def draft_padrao() -> SimulationDraft:
    return criar_draft_teste()


@pytest.fixture
def draft_sem_contribuicoes() -> SimulationDraft:
    return criar_draft_teste(
        basic_data={"sexo": "masculino", "data_nascimento": date(1990, 1, 1)},
        periodos=[],
        remuneracoes=[],
    )


@pytest.fixture
def payload_padrao(draft_padrao) -> dict:
    """O mesmo rascunho na forma JSON (camelCase) que chega pela API."""
    return draft_padrao.model_dump(mode="json", by_alias=True)


@pytest.fixture
def criar_draft():
    return criar_draft_teste
