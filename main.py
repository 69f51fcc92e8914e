import os

import pandas as pd
import streamlit as st

from dattra import APP_NAME, APP_VERSION, load_config
from dattra.config import APP_SUBTITLE
from dattra.fees import (
    FeeCalculator,
    ProcedureTable,
    AggregateResult,
    build_procedure_input,
    build_procedure_lines,
    move_row,
)
from dattra.reports import HTMLReportRenderer, CSVReportRenderer
from dattra.utils import HistoryStore, DataValidator, setup_logger
from dattra.utils.currency import format_currency, format_procedure_code, mask_currency_input, mask_digits
from dattra.utils.logger import configure_library_loggers

# -----------------------------
# Setup
# -----------------------------
CONFIG = load_config(os.environ.get("DATTRA_CONFIG"))
st.set_page_config(page_title=f"{APP_NAME} - {APP_SUBTITLE}", layout="wide")

ROLE_LABELS = ["Cirurgião", "1º Auxiliar", "2º Auxiliar", "3º Auxiliar", "4º Auxiliar", "5º Auxiliar"]
EMPTY_LINE = {
    "code": "", "description": "", "point_count": "", "value_sp": "", "value_sh": "",
    "value_tsp": "", "surcharge_percent": "", "surcharge_enabled": False,
    "assistant_count": 0, "anesthesia_enabled": False,
}


@st.cache_resource
def get_services():
    log_cfg = CONFIG["logging"]
    setup_logger("dattra", level=log_cfg["level"], log_dir=log_cfg["log_dir"], config=log_cfg)
    configure_library_loggers()
    return {
        "calculator": FeeCalculator(CONFIG["calculator"]),
        "validator": DataValidator(CONFIG["validator"]),
        "table": ProcedureTable.from_csv(CONFIG["procedures"]["table_path"]),
        "history": HistoryStore(CONFIG["history"]),
        "html": HTMLReportRenderer(CONFIG["report"]),
        "csv": CSVReportRenderer(CONFIG["report"]),
    }


services = get_services()
calculator = services["calculator"]
validator = services["validator"]
table = services["table"]
history = services["history"]


# -----------------------------
# Helpers
# -----------------------------
def mask_field(key, masker):
    st.session_state[key] = masker(st.session_state.get(key, ""))


def role_table(result) -> pd.DataFrame:
    rows = [{"Função": "Anestesista", "Valor": format_currency(result.anesthesia_value)}]
    for label, value in zip(ROLE_LABELS, result.role_values):
        if value:
            rows.append({"Função": label, "Valor": format_currency(value)})
    return pd.DataFrame(rows)


def show_result(result):
    st.subheader("Resultado")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Valor SH", format_currency(result.adjusted_value_sh))
    c2.metric("Valor TSP", format_currency(result.value_tsp))
    c3.metric("Valor SP", format_currency(result.adjusted_value_sp))
    c4.metric("Valor Total", format_currency(result.total_procedure_value))

    c1, c2, c3 = st.columns(3)
    c1.metric("Valor de Rateio", format_currency(result.pool_value))
    c2.metric("Total de Pontos", f"{result.total_points:.1f}")
    if not isinstance(result, AggregateResult):
        c3.metric("Valor do Ponto", format_currency(result.point_value))

    st.dataframe(role_table(result), hide_index=True, use_container_width=True)

    if isinstance(result, AggregateResult):
        with st.expander(f"Detalhes por linha ({len(result.lines)})", expanded=True):
            st.dataframe(services["csv"].to_dataframe(result), hide_index=True, use_container_width=True)

    code = result.code.replace(".", "").replace("-", "")
    c1, c2 = st.columns(2)
    with c1:
        st.download_button("Baixar relatório (HTML para impressão)",
                           services["html"].render(result).encode("utf-8"),
                           f"calculo_{code}.html", "text/html")
    with c2:
        st.download_button("Baixar planilha (CSV)",
                           services["csv"].render(result).encode("utf-8"),
                           f"calculo_{code}.csv", "text/csv")


def new_row():
    st.session_state["next_row_id"] = st.session_state.get("next_row_id", 0) + 1
    return {"id": st.session_state["next_row_id"], **EMPTY_LINE}


def show_errors(errors):
    for error in errors:
        st.error(error)


def warn_inconsistent(result):
    _, problems = validator.validate_result(result)
    for problem in problems:
        st.warning(problem)


# -----------------------------
# Pages
# -----------------------------
def single_procedure_page():
    st.header("Cálculo de Honorários Médicos")
    st.caption("Preencha os campos abaixo para calcular os honorários médicos")

    st.text_input("Código", key="single_code", placeholder="00.00.00.000-0", max_chars=14,
                  on_change=mask_field, args=("single_code", format_procedure_code))
    procedure = table.get_procedure(st.session_state.get("single_code", ""))
    if procedure:
        st.caption(f"{procedure.description} • Auxiliares sugeridos: {procedure.suggested_assistants}")

    c1, c2, c3 = st.columns(3)
    c1.text_input("Valor SH", key="single_value_sh", placeholder="R$ 0,00",
                  on_change=mask_field, args=("single_value_sh", mask_currency_input))
    c2.text_input("Valor TSP", key="single_value_tsp", placeholder="R$ 0,00",
                  on_change=mask_field, args=("single_value_tsp", mask_currency_input))
    c3.text_input("Valor SP", key="single_value_sp", placeholder="R$ 0,00",
                  on_change=mask_field, args=("single_value_sp", mask_currency_input))

    c1, c2 = st.columns(2)
    c1.text_input("Quantidade de Pontos", key="single_point_count",
                  on_change=mask_field, args=("single_point_count", mask_digits))
    c2.selectbox("Quantidade de Auxiliares", options=list(range(0, 6)), key="single_assistant_count")

    c1, c2 = st.columns(2)
    c1.toggle("Anestesista", key="single_anesthesia_enabled")
    surcharge_enabled = c2.toggle("Incremento", key="single_surcharge_enabled")
    if surcharge_enabled:
        c2.text_input("Incremento (%)", key="single_surcharge_percent",
                      on_change=mask_field, args=("single_surcharge_percent", mask_digits))

    if st.button("Calcular", type="primary"):
        form = {field: st.session_state.get(f"single_{field}") for field in EMPTY_LINE}
        procedure_input = build_procedure_input(form)
        is_valid, errors = validator.validate_procedure_input(procedure_input)
        if not is_valid:
            show_errors(errors)
            return
        result = calculator.allocate(procedure_input)
        warn_inconsistent(result)
        history.append(result)
        st.session_state["single_result"] = result

    if st.session_state.get("single_result") is not None:
        show_result(st.session_state["single_result"])


def multiple_procedures_page():
    st.header("Múltiplos Procedimentos")

    principal = st.text_input("Procedimento Principal", key="principal_code", placeholder="00.00.00.000-0",
                              max_chars=14, on_change=mask_field, args=("principal_code", format_procedure_code))
    percentages = table.get_percentages(principal)
    max_lines = table.max_lines(principal)

    if not principal:
        st.info("Passo 1: selecione um procedimento principal para determinar as porcentagens e o "
                "número máximo de linhas.")
        return
    if principal in table:
        st.caption(f"{table.describe(principal)} • Percentuais do SH por linha: "
                   + ", ".join(f"{p:g}%" for p in percentages))
    else:
        st.warning("Procedimento principal não encontrado na tabela: o SH de cada linha será usado integralmente.")

    rows = st.session_state.setdefault("lines", [new_row()])
    st.subheader(f"Linhas ({len(rows)}/{max_lines})")

    for i, row in enumerate(rows):
        percent = f" • {percentages[i]:g}% do valor SH" if i < len(percentages) else ""
        with st.expander(f"Linha {i + 1}{percent}", expanded=True):
            row["code"] = format_procedure_code(st.text_input("Código", value=row["code"], key=f"line_{row['id']}_code"))
            procedure = table.get_procedure(row["code"])
            if procedure:
                row["description"] = procedure.description
                st.caption(f"{procedure.description} • Auxiliares sugeridos: {procedure.suggested_assistants}")
            c1, c2, c3 = st.columns(3)
            row["value_sh"] = mask_currency_input(c1.text_input("Valor SH", value=row["value_sh"], key=f"line_{row['id']}_sh"))
            row["value_tsp"] = mask_currency_input(c2.text_input("Valor TSP", value=row["value_tsp"], key=f"line_{row['id']}_tsp"))
            row["value_sp"] = mask_currency_input(c3.text_input("Valor SP", value=row["value_sp"], key=f"line_{row['id']}_sp"))
            c1, c2 = st.columns(2)
            row["point_count"] = mask_digits(c1.text_input("Quantidade de Pontos", value=row["point_count"],
                                                           key=f"line_{row['id']}_points"))
            row["assistant_count"] = c2.selectbox("Quantidade de Auxiliares", options=list(range(0, 6)),
                                                  index=int(row["assistant_count"]), key=f"line_{row['id']}_assistants")
            c1, c2, c3 = st.columns(3)
            row["anesthesia_enabled"] = c1.toggle("Anestesista", value=row["anesthesia_enabled"],
                                                  key=f"line_{row['id']}_anesthesia")
            row["surcharge_enabled"] = c2.toggle("Incremento", value=row["surcharge_enabled"],
                                                 key=f"line_{row['id']}_surcharge_on")
            if row["surcharge_enabled"]:
                row["surcharge_percent"] = mask_digits(c3.text_input("Incremento (%)", value=row["surcharge_percent"],
                                                                     key=f"line_{row['id']}_surcharge"))

            b1, b2, b3 = st.columns(3)
            if b1.button("↑ Subir", key=f"line_{row['id']}_up", disabled=i == 0):
                st.session_state["lines"] = move_row(rows, i, i - 1)
                st.rerun()
            if b2.button("↓ Descer", key=f"line_{row['id']}_down", disabled=i == len(rows) - 1):
                st.session_state["lines"] = move_row(rows, i, i + 1)
                st.rerun()
            if b3.button("Remover", key=f"line_{row['id']}_remove", disabled=len(rows) <= 1):
                rows.pop(i)
                st.rerun()

    if len(rows) < max_lines:
        if st.button("Adicionar linha"):
            rows.append(new_row())
            st.rerun()
    else:
        st.caption(f"Limite atingido: máximo de {max_lines} procedimentos para este procedimento principal.")

    if st.button("Calcular", type="primary", key="multi_calculate"):
        lines = build_procedure_lines(rows)
        is_valid, errors = validator.validate_lines(principal, lines, table)
        if not is_valid:
            show_errors(errors)
            return
        result = calculator.allocate_multiple(principal, lines, table)
        warn_inconsistent(result)
        history.append(result)
        st.session_state["multi_result"] = result

    if st.session_state.get("multi_result") is not None:
        show_result(st.session_state["multi_result"])


def history_page():
    st.header("Histórico de Cálculos")
    records = history.read_all()
    if not records:
        st.info("Nenhum cálculo salvo.")
        return

    df = history.to_dataframe()
    for column in ("adjusted_value_sh", "value_tsp", "adjusted_value_sp", "total_procedure_value"):
        df[column] = df[column].map(lambda v: format_currency(v or 0))
    st.dataframe(df[["timestamp", "kind", "code", "lines", "adjusted_value_sh", "value_tsp", "adjusted_value_sp",
                     "total_procedure_value"]], hide_index=True, use_container_width=True)

    c1, c2 = st.columns(2)
    with c1:
        st.download_button("Baixar histórico (CSV)",
                           history.to_dataframe().to_csv(index=False).encode("utf-8"),
                           "historico.csv", "text/csv")
    with c2:
        if st.button("Limpar histórico"):
            history.clear()
            st.rerun()


# -----------------------------
# Streamlit UI
# -----------------------------
st.title(f"{APP_NAME} v.{APP_VERSION}")

page = st.sidebar.radio("Página", ["Procedimento único", "Múltiplos procedimentos", "Histórico"])
if page == "Procedimento único":
    single_procedure_page()
elif page == "Múltiplos procedimentos":
    multiple_procedures_page()
else:
    history_page()
