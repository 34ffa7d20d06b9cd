import streamlit as st

from services.app_context import require_connection
from services.data_loader import flush_write, load_all
from services.finance_core import DateRange, mes_atual
from services.finance_queries import (
    despesas_no_periodo,
    despesas_por_categoria,
    receita_por_forma_pagamento,
    resumo_financeiro,
    serie_receita_despesa,
)
from services.forms import ExpenseForm, validate_form
from services.page_state import get_page_state
from services.schemas import EXPENSE_CATEGORIES
from services.ui import date_range_picker, field_errors, is_mobile, kpi_cards, responsive_dataframe, section
from services.utils import fmt_brl, fmt_date_br, key_for, ordenar_registros, to_dataframe

st.set_page_config(page_title="Financeiro", page_icon="💰", layout="wide")
st.title("💰 Financeiro")
st.caption("Receitas, comissões e despesas da barbearia.")

ctx = require_connection()
state = get_page_state("financeiro")

FIELD_LABELS = {"description": "Descrição", "amount": "Valor", "date": "Data", "category": "Categoria"}

# --------------------------------------------------
# Período + dados
# --------------------------------------------------
inicio, fim = date_range_picker(mes_atual(), key="financeiro_periodo")
periodo = DateRange(inicio, fim)

state.start_loading()
try:
    with st.spinner("Carregando dados financeiros..."):
        data = load_all(ctx["webhook_base_url"])
    state.loaded()
except RuntimeError as e:
    state.failed(str(e))
    st.error(str(e))
    st.stop()

appointments = data["appointments"]
barbers = data["barbers"]
expenses = data["expenses"]

resumo = resumo_financeiro(appointments, expenses, barbers, periodo)
atual = resumo.atual

# --------------------------------------------------
# Cards
# --------------------------------------------------
section("📊 Resumo", f"{fmt_date_br(periodo.start)} → {fmt_date_br(periodo.end)}")
kpi_cards([
    ("Receita bruta", fmt_brl(atual.receita_bruta), resumo.variacao("receita_bruta")),
    ("Despesas totais", fmt_brl(atual.total_despesas), resumo.variacao("total_despesas")),
    ("Lucro líquido", fmt_brl(atual.lucro_liquido), resumo.variacao("lucro_liquido")),
])
st.caption(
    f"Comissões: {fmt_brl(atual.total_comissoes)} · Despesas avulsas: {fmt_brl(atual.despesas_avulsas)}"
)

st.divider()

# --------------------------------------------------
# Gráficos
# --------------------------------------------------
altura = 240 if is_mobile() else 320

section("📈 Receita x Despesas por dia")
st.line_chart(serie_receita_despesa(appointments, expenses, barbers, periodo), height=altura)

c1, c2 = (st.container(), st.container()) if is_mobile() else st.columns(2)
with c1:
    section("💳 Receita por forma de pagamento")
    formas = receita_por_forma_pagamento(appointments, periodo)
    if formas.empty:
        st.info("Nenhum agendamento confirmado com forma de pagamento no período.")
    else:
        st.bar_chart(formas.rename("Receita"), height=altura)

with c2:
    section("🏷️ Despesas por categoria")
    categorias = despesas_por_categoria(expenses, periodo)
    if categorias.empty:
        st.info("Nenhuma despesa no período.")
    else:
        st.bar_chart(categorias.rename("Valor"), horizontal=True, height=altura)

st.divider()


# --------------------------------------------------
# Despesas avulsas
# --------------------------------------------------
def salvar(method: str, arg, mensagem: str):
    state.begin_write((method, (arg,), mensagem))
    st.rerun()


def render_form(editing):
    section("✏️ Editar despesa" if editing else "➕ Nova despesa")
    with st.form("despesa_form"):
        c1, c2 = st.columns([4, 2])
        description = c1.text_input("Descrição", value=editing.description if editing else "",
                                    placeholder="Ex.: Conta de luz")
        amount = c2.number_input("Valor (R$)", min_value=0.0, step=10.0,
                                 value=float(editing.amount) if editing else 0.0)
        c3, c4 = st.columns(2)
        when = c3.date_input("Data", value=editing.date if editing else periodo.end, format="DD/MM/YYYY")
        category = c4.selectbox(
            "Categoria", EXPENSE_CATEGORIES,
            index=EXPENSE_CATEGORIES.index(editing.category) if editing and editing.category in EXPENSE_CATEGORIES else None,
            placeholder="Selecione a categoria",
        )
        b1, b2 = st.columns(2)
        ok = b1.form_submit_button("Salvar", type="primary", disabled=state.saving)
        cancelar = b2.form_submit_button("Cancelar", disabled=state.saving)

    if cancelar:
        state.close_modal()
        st.rerun()

    if ok:
        form, errors = validate_form(ExpenseForm, {
            "description": description, "amount": amount, "date": when, "category": category,
        })
        if errors:
            field_errors(errors, FIELD_LABELS)
            return
        salvar("save_expense", form.to_expense(editing.id if editing else None),
               f"Despesa {'atualizada' if editing else 'registrada'} com sucesso.")


section("🧾 Despesas avulsas")
if st.button("➕ Nova despesa", type="primary"):
    state.open_create()
    st.rerun()

if state.modal in ("create", "edit"):
    with st.container(border=True):
        render_form(state.selected if state.modal == "edit" else None)
elif state.modal == "confirm" and state.selected is not None:
    alvo = state.selected
    with st.container(border=True):
        st.warning(f"Excluir a despesa **{alvo.description}** ({fmt_brl(alvo.amount)})?")
        d1, d2 = st.columns(2)
        if d1.button("Excluir", type="primary", disabled=state.saving):
            salvar("delete_expense", alvo.id, "Despesa excluída.")
        if d2.button("Voltar", disabled=state.saving):
            state.close_modal()
            st.rerun()

flush_write(state, "Não foi possível gravar a despesa. Tente novamente.")

lista = ordenar_registros(despesas_no_periodo(expenses, periodo), "date", ascending=False)
if not lista:
    st.info("Nenhuma despesa registrada no período.")
    st.stop()

df = to_dataframe(lista, {"date": "Data", "description": "Descrição", "category": "Categoria", "amount": "Valor"})
df["Data"] = df["Data"].map(fmt_date_br)
df["Valor"] = df["Valor"].map(fmt_brl)
responsive_dataframe(df)

with st.expander("✏️ Editar / excluir despesas"):
    for e in lista:
        c1, c2, c3 = st.columns([6, 1, 1])
        c1.write(f"{fmt_date_br(e.date)} — **{e.description}** · {e.category} · {fmt_brl(e.amount)}")
        if c2.button("Editar", key=key_for("edit", e.id)):
            state.open_edit(e)
            st.rerun()
        if c3.button("Excluir", key=key_for("del", e.id)):
            state.open_confirm(e)
            st.rerun()
