# previdencia/simulador/report_generator.py
"""
Módulo para gerar os relatórios da simulação (CSV e PDF).
"""

import csv
from io import BytesIO
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from previdencia.config import settings
from previdencia.logging_config import log
from previdencia.shared.utils import formatar_data_br
from .models import SimulationResult

COLUNAS_CSV = [
    "cenario",
    "der",
    "regra",
    "elegivel",
    "tempo_total_meses",
    "carencia_meses",
    "carencia_exigida",
    "rmi_sem_descarte",
    "rmi_com_descarte",
    "ganho_estimado",
]

SEM_ALERTAS = "Nenhum alerta crítico registrado."


def formatar_valor(valor: float, com_simbolo: bool = True) -> str:
    """Formata valor monetário no padrão brasileiro (R$ 1.234,56)."""
    if valor is None or pd.isna(valor):
        valor = 0.0
    texto = f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {texto}" if com_simbolo else texto


# --- CSV ---


def montar_tabela_resultado(resultado: SimulationResult) -> pd.DataFrame:
    """Uma linha por (cenário, regra), já no formato de exportação."""
    linhas = []
    for cenario in resultado.cenarios:
        for regra in cenario.resultados:
            linhas.append({
                "cenario": cenario.der_tipo,
                "der": cenario.der.isoformat(),
                "regra": regra.nome,
                "elegivel": "sim" if regra.elegivel else "nao",
                "tempo_total_meses": regra.tempo_total_meses,
                "carencia_meses": regra.carencia_meses,
                "carencia_exigida": regra.carencia_exigida,
                "rmi_sem_descarte": f"{regra.rmi_sem_descarte:.2f}",
                "rmi_com_descarte": f"{regra.rmi_com_descarte:.2f}",
                "ganho_estimado": f"{regra.ganho_estimado:.2f}",
            })
    return pd.DataFrame(linhas, columns=COLUNAS_CSV)


def gerar_csv_resultado(resultado: SimulationResult) -> str:
    """CSV separado por ";": cabeçalho sem aspas e todos os valores entre aspas."""
    df_csv = montar_tabela_resultado(resultado)
    cabecalho = ";".join(COLUNAS_CSV) + "\n"
    if df_csv.empty:
        return cabecalho
    corpo = df_csv.to_csv(
        index=False, header=False, sep=";", quoting=csv.QUOTE_ALL, lineterminator="\n"
    )
    return cabecalho + corpo


def nome_arquivo_csv(resultado: SimulationResult) -> str:
    return f"simulacao-rmi-{resultado.simulacao_id}.csv"


def salvar_csv_resultado(resultado: SimulationResult, output_path: Optional[str] = None) -> str:
    pasta = Path(output_path or settings.OUTPUT_DIR)
    pasta.mkdir(parents=True, exist_ok=True)
    caminho = pasta / nome_arquivo_csv(resultado)
    caminho.write_text(gerar_csv_resultado(resultado), encoding="utf-8")
    log.success(f"Relatório CSV gerado: {caminho}")
    return str(caminho)


# --- PDF ---


def montar_linhas_relatorio(resultado: SimulationResult) -> List[str]:
    """Conteúdo do relatório em texto puro; o PDF desenha estas mesmas informações."""
    linhas = [
        "Relatório de Simulação Previdenciária",
        f"Simulação ID: {resultado.simulacao_id}",
        f"Gerado em: {resultado.gerado_em.strftime('%d/%m/%Y %H:%M:%S')}",
        "Cenários Avaliados:",
    ]
    for cenario in resultado.cenarios:
        linhas.append(f"- {cenario.der_tipo.upper()} ({formatar_data_br(cenario.der)})")
        for regra in cenario.resultados:
            linhas.append(
                f"  • {regra.nome} | Elegível: {'Sim' if regra.elegivel else 'Não'} | "
                f"RMI c/ descarte {formatar_valor(regra.rmi_com_descarte)}"
            )
        if cenario.melhor_opcao is not None:
            linhas.append(f"  Melhor opção: {cenario.melhor_opcao.nome}")

    linhas.append("Metodologia resumida:")
    linhas.append(resultado.metodologia_resumo)
    linhas.append("Alertas:")
    if resultado.alertas:
        linhas.extend(f"- {alerta}" for alerta in resultado.alertas)
    else:
        linhas.append(f"- {SEM_ALERTAS}")
    return linhas


def _montar_elementos(resultado: SimulationResult) -> list:
    styles = getSampleStyleSheet()

    titulo_style = ParagraphStyle(
        "CustomTitle",
        parent=styles["Heading1"],
        fontSize=14,
        textColor=colors.black,
        spaceAfter=6,
        alignment=TA_CENTER,
        fontName="Helvetica-Bold",
    )
    subtitulo_style = ParagraphStyle(
        "CustomSubtitle",
        parent=styles["Normal"],
        fontSize=9,
        textColor=colors.black,
        spaceAfter=3,
        alignment=TA_LEFT,
    )
    secao_style = ParagraphStyle(
        "Secao", parent=styles["Heading3"], fontSize=11, spaceBefore=8, spaceAfter=4
    )

    elementos = [
        Paragraph("<b>Relatório de Simulação Previdenciária</b>", titulo_style),
        Spacer(1, 0.3 * cm),
        Paragraph(f"Simulação ID: {resultado.simulacao_id}", subtitulo_style),
        Paragraph(f"Gerado em: {resultado.gerado_em.strftime('%d/%m/%Y %H:%M:%S')}", subtitulo_style),
        Spacer(1, 0.4 * cm),
        Paragraph("Cenários Avaliados", secao_style),
    ]

    for cenario in resultado.cenarios:
        elementos.append(
            Paragraph(f"<b>{cenario.der_tipo.upper()}</b> - DER {formatar_data_br(cenario.der)}", subtitulo_style)
        )
        dados_tabela = [["Regra", "Elegível", "Carência", "RMI s/ descarte", "RMI c/ descarte"]]
        for regra in cenario.resultados:
            dados_tabela.append([
                Paragraph(escape(regra.nome), styles["Normal"]),
                "Sim" if regra.elegivel else "Não",
                f"{regra.carencia_meses}/{regra.carencia_exigida}",
                formatar_valor(regra.rmi_sem_descarte),
                formatar_valor(regra.rmi_com_descarte),
            ])

        tabela = Table(dados_tabela, colWidths=[6.5 * cm, 2 * cm, 2.5 * cm, 3 * cm, 3 * cm])
        tabela.setStyle(TableStyle([
            # Cabeçalho
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 9),
            ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
            # Dados
            ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 1), (-1, -1), 8),
            ("ALIGN", (1, 1), (2, -1), "CENTER"),
            ("ALIGN", (3, 1), (4, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        elementos.append(tabela)

        if cenario.melhor_opcao is not None:
            melhor = cenario.melhor_opcao
            elementos.append(
                Paragraph(
                    f"Melhor opção: <b>{escape(melhor.nome)}</b> ({formatar_valor(melhor.rmi_final)})",
                    subtitulo_style,
                )
            )
        elementos.append(Spacer(1, 0.4 * cm))

    elementos.append(Paragraph("Metodologia resumida", secao_style))
    elementos.append(Paragraph(escape(resultado.metodologia_resumo), subtitulo_style))

    elementos.append(Paragraph("Alertas", secao_style))
    for alerta in resultado.alertas or [SEM_ALERTAS]:
        elementos.append(Paragraph(f"- {escape(alerta)}", subtitulo_style))

    elementos.append(Spacer(1, 0.5 * cm))
    elementos.append(
        Paragraph(
            f"<i>{escape(settings.APP_NAME)}</i>",
            ParagraphStyle("Footer", parent=styles["Normal"], fontSize=7, textColor=colors.grey, alignment=TA_RIGHT),
        )
    )
    return elementos


def gerar_pdf_resultado(resultado: SimulationResult) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5 * cm,
        leftMargin=1.5 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=f"Simulação {resultado.simulacao_id}",
    )
    try:
        doc.build(_montar_elementos(resultado))
    except Exception as e:
        log.error(f"Erro ao gerar PDF da simulação {resultado.simulacao_id}: {e}")
        raise
    return buffer.getvalue()


def nome_arquivo_pdf(resultado: SimulationResult) -> str:
    return f"relatorio-simulacao-{resultado.simulacao_id}.pdf"


def salvar_pdf_resultado(resultado: SimulationResult, output_path: Optional[str] = None) -> str:
    pasta = Path(output_path or settings.OUTPUT_DIR)
    pasta.mkdir(parents=True, exist_ok=True)
    caminho = pasta / nome_arquivo_pdf(resultado)
    caminho.write_bytes(gerar_pdf_resultado(resultado))
    log.success(f"Relatório PDF gerado: {caminho}")
    return str(caminho)
