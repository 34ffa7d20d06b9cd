# app.py
import sys
from pathlib import Path

import streamlit as st

# -------------------------------------------------
# Ajuste de path
# -------------------------------------------------
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# -------------------------------------------------
# Imports internos
# -------------------------------------------------
from services.app_context import connect, get_context, init_context
from services.data_loader import load_all
from services.finance_core import DateRange, mes_atual
from services.finance_queries import (
    horarios_movimentados,
    resumo_financeiro,
    top_barbeiros,
    top_servicos,
)
from services.page_state import get_page_state
from services.ui import date_range_picker, is_mobile, kpi_cards, section
from services.utils import fmt_brl, fmt_date_br

# -------------------------------------------------
# Configuração da página
# -------------------------------------------------
st.set_page_config(
    page_title="Barbearia — Relatórios",
    page_icon="💈",
    layout="wide",
)

st.title("💈 Relatórios")
st.caption("Analise o desempenho da sua barbearia.")

# -------------------------------------------------
# Contexto / Sessão
# -------------------------------------------------
init_context()
ctx = get_context()

# -------------------------------------------------
# Sidebar (conexão)
# -------------------------------------------------
with st.sidebar:
    st.subheader("📱 Interface")
    st.toggle("Modo mobile", key="modo_mobile")

    st.divider()
    st.subheader("🔧 Conexão")

    url = st.text_input("URL do webhook", value=ctx.get("webhook_base_url", ""))

    if st.button("Conectar", use_container_width=True):
        try:
            connect(url)
            st.cache_data.clear()
            st.success("✅ Webhook configurado")
            st.rerun()
        except ValueError as e:
            ctx["connected"] = False
            st.error(str(e))

    if not ctx.get("connected"):
        st.warning("Informe a URL do webhook para continuar.")
        st.stop()

# -------------------------------------------------
# Período
# -------------------------------------------------
state = get_page_state("relatorios")

inicio, fim = date_range_picker(mes_atual(), key="relatorios_periodo")
periodo = DateRange(inicio, fim)

# -------------------------------------------------
# Carregamento (leituras em paralelo)
# -------------------------------------------------
state.start_loading()
try:
    with st.spinner("Carregando dados..."):
        data = load_all(ctx["webhook_base_url"])
    state.loaded()
except RuntimeError as e:
    state.failed(str(e))
    st.error(str(e))
    st.stop()

appointments = data["appointments"]
barbers = data["barbers"]
expenses = data["expenses"]

# -------------------------------------------------
# KPIs
# -------------------------------------------------
resumo = resumo_financeiro(appointments, expenses, barbers, periodo)

section("📊 Resumo do período", f"{fmt_date_br(periodo.start)} → {fmt_date_br(periodo.end)}")
kpi_cards([
    ("Agendamentos no período", str(resumo.atual.atendimentos), resumo.variacao("atendimentos")),
    ("Receita bruta", fmt_brl(resumo.atual.receita_bruta), resumo.variacao("receita_bruta")),
    ("Lucro líquido", fmt_brl(resumo.atual.lucro_liquido), resumo.variacao("lucro_liquido")),
])

st.divider()

# -------------------------------------------------
# Rankings
# -------------------------------------------------
altura = 240 if is_mobile() else 360
c1, c2 = (st.container(), st.container()) if is_mobile() else st.columns(2)

with c1:
    section("✂️ Serviços mais vendidos")
    servicos = top_servicos(appointments, periodo)
    if servicos.empty:
        st.info("Sem agendamentos no período.")
    else:
        st.bar_chart(servicos.rename("Agendamentos"), horizontal=True, height=altura)

with c2:
    section("💇 Barbeiros com mais atendimentos")
    ranking = top_barbeiros(appointments, periodo, barbers)
    if ranking.empty:
        st.info("Sem agendamentos no período.")
    else:
        st.bar_chart(ranking.rename("Agendamentos"), height=altura)

st.divider()

# -------------------------------------------------
# Horários de pico
# -------------------------------------------------
section("🕘 Horários mais movimentados", "Fluxo de agendamentos ao longo do dia no período.")
st.line_chart(horarios_movimentados(appointments, periodo).rename("Agendamentos"), height=altura)
