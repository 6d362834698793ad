import re
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

from dateutil.relativedelta import relativedelta

MILHAR_SEM_CENTAVOS = re.compile(r"^\d{1,3}(\.\d{3})+$")


def parse_moeda(value: Any) -> Decimal:
    """Converte valores monetários vindos de importação para Decimal.

    Aceita números e textos no padrão brasileiro ("R$ 1.234,56") ou com
    ponto decimal ("1234.56"). Diferente de uma conversão silenciosa,
    valores ilegíveis levantam ValueError para que o registro seja rejeitado.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Valor monetário inválido: {value!r}")
    if isinstance(value, Decimal):
        resultado = value
    elif isinstance(value, (int, float)):
        resultado = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace("R$", "").replace(" ", "")
        if "," in cleaned and "." in cleaned:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        elif "," in cleaned:
            cleaned = cleaned.replace(",", ".")
        elif MILHAR_SEM_CENTAVOS.match(cleaned):
            # pontos só como separador de milhar: "1.234" = 1234
            cleaned = cleaned.replace(".", "")
        try:
            resultado = Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Valor monetário inválido: {value!r}") from None
    else:
        raise ValueError(f"Valor monetário inválido: {value!r}")

    if not resultado.is_finite():
        raise ValueError(f"Valor monetário inválido: {value!r}")
    if resultado < 0:
        raise ValueError(f"Valor monetário negativo: {value!r}")
    return resultado


def arredondar_moeda(valor: float | Decimal) -> float:
    """Arredonda para centavos (meio para cima), como a folha oficial."""
    return float(Decimal(str(valor)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def competencia_de(data: date) -> str:
    return f"{data.year:04d}-{data.month:02d}"


def parse_competencia(texto: str) -> date:
    """Lê uma competência "AAAA-MM" (ou "MM/AAAA") e devolve o primeiro dia do mês."""
    texto = str(texto).strip()
    try:
        if "/" in texto:
            mes, ano = texto.split("/")
        else:
            ano, mes = texto.split("-")
        return date(int(ano), int(mes), 1)
    except ValueError:
        raise ValueError(f"Competência inválida: {texto!r}") from None


def meses_inteiros(inicio: date, fim: date) -> int:
    """Meses completos do intervalo fechado [inicio, fim]; dias restantes são truncados."""
    if fim < inicio:
        return 0
    delta = relativedelta(fim + timedelta(days=1), inicio)
    return delta.years * 12 + delta.months


def meses_entre_competencias(anterior: date, seguinte: date) -> int:
    """Quantidade de competências vazias entre dois meses (exclusivo)."""
    delta = relativedelta(seguinte.replace(day=1), anterior.replace(day=1))
    return max(0, delta.years * 12 + delta.months - 1)


def formatar_data_br(data: date) -> str:
    return data.strftime("%d/%m/%Y")
