# previdencia/simulador/models.py
"""
Modelos de dados da simulação (rascunho de entrada e resultados).

Os nomes são snake_case no Python e camelCase na forma serializada, o mesmo
formato que o assistente de simulação grava e reabre.
"""

import hashlib
import json
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from previdencia.shared.utils import parse_competencia, parse_moeda


class Categoria(str, Enum):
    COMUM = "comum"
    ESPECIAL_15 = "especial_15"
    ESPECIAL_20 = "especial_20"
    ESPECIAL_25 = "especial_25"
    PCD_LEVE = "pcd_leve"
    PCD_MODERADO = "pcd_moderado"
    PCD_GRAVE = "pcd_grave"

    @property
    def especial(self) -> bool:
        return self.value.startswith("especial")

    @property
    def pcd(self) -> bool:
        return self.value.startswith("pcd")


class Fonte(str, Enum):
    CNIS_UPLOAD = "cnis_upload"
    CONTAGEM_UPLOAD = "contagem_upload"
    PLANILHA = "planilha"
    MANUAL = "manual"


# Confiança da origem quando todas as remunerações duplicadas estão sinalizadas
CONFIANCA_FONTE = {
    Fonte.MANUAL: 4,
    Fonte.CNIS_UPLOAD: 3,
    Fonte.CONTAGEM_UPLOAD: 2,
    Fonte.PLANILHA: 1,
}


class StatusConcomitancia(str, Enum):
    OK = "ok"
    AJUSTADO = "ajustado"
    PENDENTE = "pendente"


class MotivoInconsistencia(str, Enum):
    VALOR_ZERO = "valor_zero"
    DUPLICADO = "duplicado"
    ABAIXO_MINIMO = "abaixo_minimo"
    ACIMA_TETO = "acima_teto"


Sexo = Literal["feminino", "masculino", "outro", "nao_informado"]


class _ModeloBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- ENTRADA (RASCUNHO) ---


class PeriodoContribuicao(_ModeloBase):
    id: str
    inicio: date
    fim: date
    categoria: Categoria = Categoria.COMUM
    indicador_carencia: bool = True
    fonte: Fonte = Fonte.MANUAL
    observacoes: Optional[str] = None
    status_concomitancia: Optional[StatusConcomitancia] = None
    ajustado_por: Optional[str] = None
    manual_override: bool = False
    # Recategorização manual; nunca altera as datas do vínculo
    categoria_ajustada: Optional[Categoria] = None

    @property
    def categoria_efetiva(self) -> Categoria:
        if self.manual_override and self.categoria_ajustada is not None:
            return self.categoria_ajustada
        return self.categoria

    @property
    def resolvido_manualmente(self) -> bool:
        return self.manual_override or self.status_concomitancia == StatusConcomitancia.AJUSTADO


class Remuneracao(_ModeloBase):
    id: str
    competencia: str
    valor: float
    moeda: Literal["BRL"] = "BRL"
    fonte: Fonte = Fonte.MANUAL
    inconsistente: bool = False
    motivos_inconsistencia: List[MotivoInconsistencia] = Field(default_factory=list)
    descartavel: bool = True

    @field_validator("valor", mode="before")
    @classmethod
    def converter_valor(cls, v):
        return float(parse_moeda(v))

    @field_validator("competencia")
    @classmethod
    def normalizar_competencia(cls, v: str) -> str:
        data = parse_competencia(v)
        return f"{data.year:04d}-{data.month:02d}"

    @property
    def data_competencia(self) -> date:
        return parse_competencia(self.competencia)


class DadosBasicos(_ModeloBase):
    sexo: Sexo = "nao_informado"
    data_nascimento: Optional[date] = None
    der: date
    der_reafirmada: Optional[date] = None
    tipo_beneficio: List[str] = Field(default_factory=list)
    nao_sei_beneficio: bool = False
    modo_simplificado: bool = False

    @field_validator("data_nascimento", "der_reafirmada", mode="before")
    @classmethod
    def texto_vazio_e_nulo(cls, v):
        # O assistente grava "" para datas opcionais não preenchidas
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ImportSummary(_ModeloBase):
    fonte: Fonte
    periodos_importados: int = 0
    remuneracoes_importadas: int = 0
    mensagens: List[str] = Field(default_factory=list)


class SimulationDraft(_ModeloBase):
    basic_data: DadosBasicos
    periodos: List[PeriodoContribuicao] = Field(default_factory=list)
    remuneracoes: List[Remuneracao] = Field(default_factory=list)
    import_summaries: List[ImportSummary] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.now)

    def content_hash(self) -> str:
        """Hash do conteúdo do rascunho, sem o updatedAt (informado pelo chamador)."""
        conteudo = self.model_dump(mode="json", by_alias=True, exclude={"updated_at"})
        canonico = json.dumps(conteudo, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
        return hashlib.sha256(canonico.encode("utf-8")).hexdigest()


# --- SAÍDA (RESULTADOS) ---


class _ResultadoBase(_ModeloBase):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CompetenciaDescartada(_ResultadoBase):
    competencia: str
    valor: float


class RegraResultado(_ResultadoBase):
    regra_id: str
    nome: str
    elegivel: bool
    motivo_nao_elegivel: Optional[str] = None
    tempo_total_meses: int
    carencia_meses: int
    carencia_exigida: int
    rmi_sem_descarte: float = 0.0
    rmi_com_descarte: float = 0.0
    competencias_descartadas: List[CompetenciaDescartada] = Field(default_factory=list)
    # Ganho monetário mensal do descarte (RMI com descarte - RMI sem descarte)
    ganho_estimado: float = 0.0
    descarte_aplicavel: bool = False

    @property
    def rmi_final(self) -> float:
        return self.rmi_com_descarte if self.descarte_aplicavel else self.rmi_sem_descarte


class CenarioResultado(_ResultadoBase):
    der_tipo: Literal["atual", "reafirmada"]
    der: date
    resultados: List[RegraResultado] = Field(default_factory=list)
    melhor_opcao: Optional[RegraResultado] = None


class SimulationResult(_ResultadoBase):
    simulacao_id: str
    metodologia_resumo: str
    alertas: List[str] = Field(default_factory=list)
    cenarios: List[CenarioResultado] = Field(default_factory=list)
    gerado_em: datetime
