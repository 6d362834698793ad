# tests/test_descarte.py

import pytest

from previdencia.simulador.descarte import ItemDescarte, otimizar_descarte


def criar_itens(valores, descartaveis=None):
    descartaveis = descartaveis or [True] * len(valores)
    return [
        ItemDescarte(competencia=f"2020-{indice + 1:02d}", valor=valor, descartavel=descartavel)
        for indice, (valor, descartavel) in enumerate(zip(valores, descartaveis))
    ]


def test_descarta_as_duas_menores_com_piso_tres():
    # Arrange
    itens = criar_itens([100, 200, 300, 900, 1000])
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=3)
    # Assert
    assert [item.valor for item in resultado.descartadas] == [100, 200]
    assert resultado.media_sem_descarte == pytest.approx(500.0)
    assert resultado.media_com_descarte == pytest.approx(733.33, abs=0.01)
    # Nenhum outro k permitido chega à mesma média
    assert resultado.medias_por_k == pytest.approx((500.0, 600.0, 733.333333))
    assert max(resultado.medias_por_k[:2]) < resultado.media_com_descarte


def test_piso_igual_ao_total_nao_descarta():
    # Arrange
    itens = criar_itens([100, 200, 300])
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=3)
    # Assert
    assert resultado.quantidade == 0
    assert resultado.media_com_descarte == resultado.media_sem_descarte


def test_piso_maior_que_total_nao_gera_limite_negativo():
    # Arrange
    itens = criar_itens([100, 900])
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=10)
    # Assert
    assert resultado.quantidade == 0
    assert resultado.medias_por_k == pytest.approx((500.0,))


def test_piso_sempre_respeitado():
    # Arrange
    valores = [10, 20, 30, 40, 50, 60, 5000, 6000]
    itens = criar_itens(valores)
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=4)
    # Assert
    assert len(itens) - resultado.quantidade >= 4
    assert resultado.quantidade == 4


def test_empate_escolhe_o_menor_numero_de_descartes():
    # Arrange
    itens = criar_itens([500, 500, 500])
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=1)
    # Assert
    assert resultado.quantidade == 0
    assert resultado.media_com_descarte == pytest.approx(500.0)


def test_registro_nao_descartavel_fica_na_media():
    # Arrange
    itens = criar_itens([50, 100, 1000], descartaveis=[False, True, True])
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=1)
    # Assert
    assert [item.competencia for item in resultado.descartadas] == ["2020-02"]
    assert resultado.media_com_descarte == pytest.approx(525.0)


def test_empate_de_valores_desempata_pela_competencia():
    # Arrange
    itens = [
        ItemDescarte("2020-05", 100.0),
        ItemDescarte("2020-01", 100.0),
        ItemDescarte("2020-03", 900.0),
    ]
    # Act
    resultado = otimizar_descarte(itens, minimo_restante=2)
    # Assert
    assert [item.competencia for item in resultado.descartadas] == ["2020-01"]


def test_serie_vazia():
    # Act
    resultado = otimizar_descarte([], minimo_restante=0)
    # Assert
    assert resultado.quantidade == 0
    assert resultado.media_sem_descarte == 0.0
