# previdencia/rules_catalog.py
"""
Catálogo de regras de aposentadoria (pós-EC 103/2019).

Cada regra é um registro de configuração (limites, fatores de conversão,
categorias exigidas, coeficiente da RMI) consumido por um único avaliador
genérico em `simulador.business_logic`. Para incluir uma regra nova basta
acrescentar um registro ao CATALOG.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from previdencia.simulador.models import Categoria, DadosBasicos


@dataclass(frozen=True)
class PorSexo:
    feminino: int
    masculino: int

    def para(self, sexo: str) -> int:
        # "outro" e "nao_informado" usam os parâmetros masculinos (mais exigentes)
        return self.feminino if sexo == "feminino" else self.masculino


@dataclass(frozen=True)
class PontosProgressivos:
    """Pontuação (idade + tempo) que sobe 1 ponto por ano até o limite."""

    ano_base: int = 2019
    inicial: PorSexo = PorSexo(feminino=86, masculino=96)
    limite: PorSexo = PorSexo(feminino=100, masculino=105)

    def exigidos(self, der: date, sexo: str) -> int:
        acrescimo = max(0, der.year - self.ano_base)
        return min(self.limite.para(sexo), self.inicial.para(sexo) + acrescimo)


@dataclass(frozen=True)
class Pedagio:
    data_corte: date = date(2019, 11, 13)
    faltante_maximo_meses: int = 24
    percentual: float = 0.50


@dataclass(frozen=True)
class TempoCategoria:
    """Exigência de tempo em categorias específicas (especial, PcD)."""

    categorias: Tuple[Categoria, ...]
    # Mínimo por categoria de referência (a predominante no histórico)
    minimo_meses: Dict[Categoria, PorSexo]
    # Equivalência entre categorias da própria exigência (ex.: 15 anos -> 25 anos)
    fatores: Dict[Categoria, float] = field(default_factory=dict)
    descricao: str = "Tempo na categoria exigida"


@dataclass(frozen=True)
class Coeficiente:
    base: float = 1.0
    acrescimo_anual: float = 0.0
    anos_base: PorSexo = PorSexo(feminino=15, masculino=20)
    maximo: float = 1.0

    def calcular(self, tempo_meses: int, sexo: str) -> float:
        if not self.acrescimo_anual:
            return min(self.maximo, self.base)
        anos_completos = tempo_meses // 12
        excedente = max(0, anos_completos - self.anos_base.para(sexo))
        return min(self.maximo, self.base + excedente * self.acrescimo_anual)


@dataclass(frozen=True)
class RegraBeneficio:
    id: str
    nome: str
    descricao: str
    tempo_min_meses: PorSexo
    carencia_min: int
    idade_min: Optional[PorSexo] = None
    pontos: Optional[PontosProgressivos] = None
    pedagio: Optional[Pedagio] = None
    tempo_categoria: Optional[TempoCategoria] = None
    permite_descarte: bool = False
    # Meses que precisam sobrar depois do descarte; nunca abaixo da carência
    minimo_pos_descarte: Optional[PorSexo] = None
    # Conversão de tempo especial para comum, por sexo
    fatores_conversao: Dict[str, Dict[Categoria, float]] = field(default_factory=dict)
    coeficiente: Coeficiente = Coeficiente()

    def fatores_para(self, sexo: str) -> Dict[Categoria, float]:
        chave = "feminino" if sexo == "feminino" else "masculino"
        return self.fatores_conversao.get(chave, {})

    def piso_descarte(self, sexo: str) -> int:
        if self.minimo_pos_descarte is None:
            return self.carencia_min
        return max(self.carencia_min, self.minimo_pos_descarte.para(sexo))


# Fatores do art. 70 do Decreto 3.048/99 (especial -> comum)
_FATORES_ESPECIAL_COMUM = {
    "feminino": {
        Categoria.ESPECIAL_15: 2.0,
        Categoria.ESPECIAL_20: 1.5,
        Categoria.ESPECIAL_25: 1.2,
    },
    "masculino": {
        Categoria.ESPECIAL_15: 2.33,
        Categoria.ESPECIAL_20: 1.75,
        Categoria.ESPECIAL_25: 1.4,
    },
}

_TEMPO_ESPECIAL = TempoCategoria(
    categorias=(Categoria.ESPECIAL_15, Categoria.ESPECIAL_20, Categoria.ESPECIAL_25),
    minimo_meses={
        Categoria.ESPECIAL_15: PorSexo(feminino=300, masculino=300),
        Categoria.ESPECIAL_20: PorSexo(feminino=300, masculino=300),
        Categoria.ESPECIAL_25: PorSexo(feminino=300, masculino=300),
    },
    # Tudo expresso em equivalente de 25 anos
    fatores={
        Categoria.ESPECIAL_15: 1.67,
        Categoria.ESPECIAL_20: 1.25,
        Categoria.ESPECIAL_25: 1.0,
    },
    descricao="Tempo especial",
)

_TEMPO_PCD = TempoCategoria(
    categorias=(Categoria.PCD_LEVE, Categoria.PCD_MODERADO, Categoria.PCD_GRAVE),
    minimo_meses={
        Categoria.PCD_LEVE: PorSexo(feminino=28 * 12, masculino=33 * 12),
        Categoria.PCD_MODERADO: PorSexo(feminino=24 * 12, masculino=29 * 12),
        Categoria.PCD_GRAVE: PorSexo(feminino=20 * 12, masculino=25 * 12),
    },
    descricao="Tempo como pessoa com deficiência",
)


CATALOG: Dict[str, RegraBeneficio] = {
    "idade": RegraBeneficio(
        id="idade",
        nome="Aposentadoria por Idade",
        descricao="Regra permanente pós-EC 103 baseada em idade mínima e carência.",
        tempo_min_meses=PorSexo(feminino=180, masculino=180),
        carencia_min=180,
        idade_min=PorSexo(feminino=62, masculino=65),
        permite_descarte=True,
    ),
    "programada": RegraBeneficio(
        id="programada",
        nome="Aposentadoria Programada Pós-EC 103",
        descricao="60% da média + 2% por ano acima de 20 anos (homem) ou 15 anos (mulher).",
        tempo_min_meses=PorSexo(feminino=180, masculino=240),
        carencia_min=180,
        idade_min=PorSexo(feminino=62, masculino=65),
        permite_descarte=True,
        minimo_pos_descarte=PorSexo(feminino=180, masculino=240),
        coeficiente=Coeficiente(base=0.60, acrescimo_anual=0.02),
    ),
    "transicao_pontos": RegraBeneficio(
        id="transicao_pontos",
        nome="Regra de Transição por Pontos",
        descricao="Idade + tempo de contribuição precisa atingir a pontuação vigente na DER.",
        tempo_min_meses=PorSexo(feminino=360, masculino=420),
        carencia_min=180,
        pontos=PontosProgressivos(),
        permite_descarte=True,
        minimo_pos_descarte=PorSexo(feminino=360, masculino=420),
        fatores_conversao=_FATORES_ESPECIAL_COMUM,
    ),
    "transicao_pedagio50": RegraBeneficio(
        id="transicao_pedagio50",
        nome="Transição Pedágio 50%",
        descricao="Para quem faltava até 2 anos em 13/11/2019 e cumpre pedágio de 50%.",
        tempo_min_meses=PorSexo(feminino=360, masculino=420),
        carencia_min=180,
        pedagio=Pedagio(),
        fatores_conversao=_FATORES_ESPECIAL_COMUM,
    ),
    "especial": RegraBeneficio(
        id="especial",
        nome="Aposentadoria Especial",
        descricao="Exige 25 anos (ou equivalente) em atividade especial com carência mínima.",
        tempo_min_meses=PorSexo(feminino=180, masculino=180),
        carencia_min=180,
        tempo_categoria=_TEMPO_ESPECIAL,
    ),
    "pcd": RegraBeneficio(
        id="pcd",
        nome="Aposentadoria da Pessoa com Deficiência",
        descricao="Tempo mínimo varia conforme o grau da deficiência (LC 142/2013).",
        tempo_min_meses=PorSexo(feminino=180, masculino=180),
        carencia_min=180,
        tempo_categoria=_TEMPO_PCD,
        permite_descarte=True,
    ),
}


def get_regra(regra_id: str) -> RegraBeneficio:
    if regra_id not in CATALOG:
        raise ValueError(f"Regra não mapeada no catálogo: {regra_id}")
    return CATALOG[regra_id]


def listar_regras() -> List[RegraBeneficio]:
    return list(CATALOG.values())


def regras_aplicaveis(dados: DadosBasicos) -> List[RegraBeneficio]:
    """Regras a avaliar, na ordem do catálogo.

    Regras fora do interesse declarado ficam de fora do resultado (não são
    marcadas como inelegíveis). "Não sei qual benefício" ou nenhuma escolha
    avaliam o catálogo inteiro.
    """
    if dados.nao_sei_beneficio or not dados.tipo_beneficio:
        return listar_regras()
    escolhidas = set(dados.tipo_beneficio)
    return [regra for regra in CATALOG.values() if regra.id in escolhidas]
