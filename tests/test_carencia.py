# tests/test_carencia.py

from datetime import date

from previdencia.simulador.carencia import (
    calcular_carencia,
    calcular_tempo_contribuicao,
    calcular_tempo_em_categorias,
    calcular_tempo_por_categoria,
)
from previdencia.simulador.models import Categoria, Fonte, PeriodoContribuicao
from previdencia.simulador.timeline import normalizar_timeline

DER = date(2024, 6, 1)


def criar_timeline(*periodos):
    return normalizar_timeline(list(periodos), [])


def criar_periodo(id, inicio, fim, **extras):
    return PeriodoContribuicao(id=id, inicio=inicio, fim=fim, **extras)


def test_doze_meses_especiais_com_fator_1_2_viram_14():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2020, 1, 1), date(2020, 12, 31), categoria=Categoria.ESPECIAL_25)
    )
    # Act
    meses = calcular_carencia(timeline, DER, fatores={Categoria.ESPECIAL_25: 1.2})
    # Assert
    assert meses == 14


def test_sem_fator_conta_duracao_simples():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2020, 1, 1), date(2020, 12, 31), categoria=Categoria.ESPECIAL_25)
    )
    # Act & Assert
    assert calcular_carencia(timeline, DER) == 12


def test_truncamento_ocorre_so_no_total():
    # Arrange: 7 + 7 meses x 1,4 = 19,6 -> 19 (truncando cada trecho seriam 9 + 9 = 18)
    timeline = criar_timeline(
        criar_periodo("p1", date(2010, 1, 1), date(2010, 7, 31), categoria=Categoria.ESPECIAL_25),
        criar_periodo("p2", date(2012, 1, 1), date(2012, 7, 31), categoria=Categoria.ESPECIAL_25),
    )
    # Act
    meses = calcular_carencia(timeline, DER, fatores={Categoria.ESPECIAL_25: 1.4})
    # Assert
    assert meses == 19


def test_periodo_que_ultrapassa_a_der_conta_ate_a_der():
    # Arrange
    timeline = criar_timeline(criar_periodo("p1", date(2020, 1, 1), date(2020, 12, 31)))
    # Act
    meses = calcular_carencia(timeline, date(2020, 6, 30))
    # Assert
    assert meses == 6


def test_periodo_posterior_a_der_e_ignorado():
    # Arrange
    timeline = criar_timeline(criar_periodo("p1", date(2025, 1, 1), date(2025, 12, 31)))
    # Act & Assert
    assert calcular_carencia(timeline, DER) == 0


def test_dias_que_sobram_sao_truncados():
    # Arrange
    timeline = criar_timeline(criar_periodo("p1", date(2020, 1, 15), date(2020, 3, 10)))
    # Act & Assert
    assert calcular_carencia(timeline, DER) == 1


def test_periodo_sem_indicador_de_carencia_conta_so_no_tempo():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2019, 1, 1), date(2019, 12, 31)),
        criar_periodo("p2", date(2020, 1, 1), date(2020, 12, 31), indicador_carencia=False),
    )
    # Act
    carencia = calcular_carencia(timeline, DER)
    tempo = calcular_tempo_contribuicao(timeline, DER)
    # Assert
    assert carencia == 12
    assert tempo == 24


def test_periodo_pcd_conta_duracao_integral_mesmo_com_fatores():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2020, 1, 1), date(2020, 12, 31), categoria=Categoria.PCD_GRAVE)
    )
    # Act
    meses = calcular_carencia(timeline, DER, fatores={Categoria.ESPECIAL_25: 1.4})
    # Assert
    assert meses == 12


def test_tempo_por_categoria_sem_conversao():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2010, 1, 1), date(2010, 12, 31)),
        criar_periodo("p2", date(2011, 1, 1), date(2011, 6, 30), categoria=Categoria.ESPECIAL_15),
    )
    # Act
    tempos = calcular_tempo_por_categoria(timeline, DER)
    # Assert
    assert tempos[Categoria.COMUM] == 12
    assert tempos[Categoria.ESPECIAL_15] == 6
    assert tempos[Categoria.PCD_LEVE] == 0


def test_tempo_em_categorias_soma_so_as_pedidas():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2010, 1, 1), date(2010, 12, 31)),
        criar_periodo("p2", date(2011, 1, 1), date(2011, 12, 31), categoria=Categoria.ESPECIAL_20),
    )
    # Act
    meses = calcular_tempo_em_categorias(
        timeline, DER, [Categoria.ESPECIAL_20], fatores={Categoria.ESPECIAL_20: 1.25}
    )
    # Assert
    assert meses == 15


def test_concomitancia_no_meio_do_mes_nao_perde_meses():
    # Arrange: a planilha cobre parte do vínculo do CNIS começando no dia 10
    timeline = criar_timeline(
        criar_periodo("p1", date(2000, 1, 1), date(2000, 12, 31), fonte=Fonte.CNIS_UPLOAD),
        criar_periodo("p2", date(2000, 3, 10), date(2000, 4, 20), fonte=Fonte.PLANILHA),
    )
    # Act
    carencia = calcular_carencia(timeline, DER)
    tempo = calcular_tempo_contribuicao(timeline, DER)
    tempos = calcular_tempo_por_categoria(timeline, DER)
    # Assert
    assert len(timeline.periodos) == 3
    assert carencia == 12
    assert tempo == 12
    assert tempos[Categoria.COMUM] == 12


def test_concomitancia_de_um_dia_nao_perde_meses():
    # Arrange
    timeline = criar_timeline(
        criar_periodo("p1", date(2000, 1, 1), date(2000, 12, 31)),
        criar_periodo("p2", date(2000, 6, 15), date(2000, 6, 15)),
    )
    # Act & Assert
    assert calcular_carencia(timeline, DER) == 12


def test_trechos_de_categorias_diferentes_contam_separados():
    # Arrange: 01/01 a 14/07 comum e 15/07 a 31/12 especial; cada sequência trunca seus dias
    timeline = criar_timeline(
        criar_periodo("p1", date(2000, 1, 1), date(2000, 7, 14)),
        criar_periodo("p2", date(2000, 7, 15), date(2000, 12, 31), categoria=Categoria.ESPECIAL_25),
    )
    # Act
    tempos = calcular_tempo_por_categoria(timeline, DER)
    # Assert
    assert tempos[Categoria.COMUM] == 6
    assert tempos[Categoria.ESPECIAL_25] == 5
