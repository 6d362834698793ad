# tests/test_runner.py

from datetime import date, datetime

import pytest

from previdencia.simulador.exceptions import ValidationError
from previdencia.simulador.models import Fonte, PeriodoContribuicao
from previdencia.simulador import runner
from previdencia.simulador.runner import CacheSimulacao, evaluate

GERADO_EM = datetime(2024, 6, 1, 10, 0, 0)


def test_avaliacao_completa(draft_padrao):
    # Act
    resultado = evaluate(draft_padrao, gerado_em=GERADO_EM)
    # Assert
    assert len(resultado.cenarios) == 1
    cenario = resultado.cenarios[0]
    assert cenario.der_tipo == "atual"
    assert [r.regra_id for r in cenario.resultados] == [
        "idade",
        "programada",
        "transicao_pontos",
        "transicao_pedagio50",
        "especial",
        "pcd",
    ]
    assert cenario.melhor_opcao.regra_id == "idade"
    assert cenario.melhor_opcao.rmi_final == pytest.approx(2000.0)
    assert resultado.alertas == []
    assert resultado.simulacao_id == draft_padrao.content_hash()[:16]
    assert "07/1994" in resultado.metodologia_resumo


def test_mesma_entrada_gera_mesmo_resultado(draft_padrao):
    # Act
    primeiro = evaluate(draft_padrao, gerado_em=GERADO_EM)
    segundo = evaluate(draft_padrao.model_copy(update={"updated_at": datetime(2030, 1, 1)}), gerado_em=GERADO_EM)
    # Assert
    assert primeiro.model_dump_json() == segundo.model_dump_json()


def test_der_reafirmada_gera_segundo_cenario(criar_draft):
    # Arrange
    draft = criar_draft(basic_data={"der_reafirmada": date(2025, 6, 1)})
    # Act
    resultado = evaluate(draft, gerado_em=GERADO_EM)
    # Assert
    assert [(c.der_tipo, c.der) for c in resultado.cenarios] == [
        ("atual", date(2024, 6, 1)),
        ("reafirmada", date(2025, 6, 1)),
    ]


def test_sem_contribuicoes_nenhuma_regra_elegivel(draft_sem_contribuicoes):
    # Act
    resultado = evaluate(draft_sem_contribuicoes, gerado_em=GERADO_EM)
    # Assert
    cenario = resultado.cenarios[0]
    assert all(not r.elegivel for r in cenario.resultados)
    assert cenario.melhor_opcao is None
    assert any("Nenhuma regra elegível" in alerta for alerta in resultado.alertas)


def test_tipo_beneficio_limita_as_regras(criar_draft):
    # Arrange
    draft = criar_draft(basic_data={"tipo_beneficio": ["programada"]})
    # Act
    resultado = evaluate(draft, gerado_em=GERADO_EM)
    # Assert
    assert [r.regra_id for r in resultado.cenarios[0].resultados] == ["programada"]


def test_concomitancia_pendente_nao_interrompe_o_calculo(criar_draft):
    # Arrange: dois vínculos de origens diferentes no mesmo mês, sem resolução manual
    periodos = [
        PeriodoContribuicao(id="p1", inicio=date(2005, 1, 1), fim=date(2024, 5, 31), fonte=Fonte.CNIS_UPLOAD),
        PeriodoContribuicao(id="p2", inicio=date(2010, 3, 1), fim=date(2010, 3, 31), fonte=Fonte.PLANILHA),
    ]
    draft = criar_draft(periodos=periodos)
    # Act
    resultado = evaluate(draft, gerado_em=GERADO_EM)
    # Assert
    assert any("Concomitância não resolvida" in alerta for alerta in resultado.alertas)
    assert resultado.cenarios[0].melhor_opcao.regra_id == "idade"


def test_entrada_invalida_nao_gera_resultado_parcial(criar_draft):
    # Arrange
    draft = criar_draft(
        periodos=[PeriodoContribuicao(id="p9", inicio=date(2020, 1, 1), fim=date(2019, 1, 1))]
    )
    # Act & Assert
    with pytest.raises(ValidationError) as erro:
        evaluate(draft)
    assert erro.value.registro == "periodos[0] (id=p9)"


def test_varias_threads_dao_o_mesmo_resultado(draft_padrao, monkeypatch):
    # Arrange
    sequencial = evaluate(draft_padrao, gerado_em=GERADO_EM)
    monkeypatch.setattr(runner.settings, "MAX_WORKERS", 4)
    # Act
    paralelo = evaluate(draft_padrao, gerado_em=GERADO_EM)
    # Assert
    assert paralelo == sequencial


def test_cache_reaproveita_resultado(draft_padrao, criar_draft):
    # Arrange
    cache = CacheSimulacao()
    # Act
    primeiro = cache.obter(draft_padrao)
    segundo = cache.obter(draft_padrao.model_copy(update={"updated_at": datetime(2030, 1, 1)}))
    outro = cache.obter(criar_draft(basic_data={"sexo": "masculino"}))
    # Assert
    assert segundo is primeiro
    assert outro is not primeiro
    assert len(cache) == 2


def test_cache_remove_o_resultado_usado_ha_mais_tempo(draft_padrao, criar_draft):
    # Arrange
    cache = CacheSimulacao(max_entradas=2)
    masculino = criar_draft(basic_data={"sexo": "masculino"})
    reafirmada = criar_draft(basic_data={"der_reafirmada": date(2025, 6, 1)})
    cache.obter(draft_padrao)
    cache.obter(masculino)
    cache.obter(draft_padrao)
    # Act
    cache.obter(reafirmada)
    # Assert
    assert len(cache) == 2
    assert draft_padrao in cache
    assert reafirmada in cache
    assert masculino not in cache


def test_cache_usa_o_limite_das_configuracoes(monkeypatch):
    # Arrange
    monkeypatch.setattr(runner.settings, "CACHE_MAX_ENTRADAS", 3)
    # Act
    cache = CacheSimulacao()
    # Assert
    assert cache.max_entradas == 3
