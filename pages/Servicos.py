import dataclasses

import streamlit as st

from services.app_context import require_connection
from services.data_loader import flush_write, load_services
from services.forms import ServiceForm, validate_form
from services.page_state import get_page_state
from services.status import active_badge
from services.ui import field_errors, responsive_dataframe, section
from services.utils import fmt_brl, key_for, ordenar_registros, to_dataframe

st.set_page_config(page_title="Serviços", page_icon="✂️", layout="wide")
st.title("✂️ Serviços")
st.caption("Gerencie os serviços oferecidos, preços e durações.")

ctx = require_connection()
state = get_page_state("servicos")

FIELD_LABELS = {"name": "Nome", "price": "Preço", "duration": "Duração", "status": "Status"}
SORT_KEYS = {"Nome": "name", "Preço": "price", "Duração": "duration", "Status": "status"}

state.start_loading()
with st.spinner("Carregando serviços..."):
    services = load_services(ctx["webhook_base_url"])
state.loaded()


def salvar(service, mensagem: str):
    state.begin_write(("save_service", (service,), mensagem))
    st.rerun()


def render_form(editing):
    section(f"✏️ Editar {editing.name}" if editing else "➕ Novo serviço")
    with st.form("servico_form"):
        c1, c2, c3, c4 = st.columns([4, 2, 2, 2])
        name = c1.text_input("Nome", value=editing.name if editing else "")
        price = c2.number_input("Preço (R$)", min_value=0.0, step=5.0,
                                value=float(editing.price) if editing else 0.0)
        duration = c3.number_input("Duração (min)", min_value=1, step=5,
                                   value=int(editing.duration) if editing else 30)
        status = c4.selectbox("Status", ["active", "inactive"], format_func=active_badge,
                              index=0 if not editing or editing.status == "active" else 1)

        b1, b2 = st.columns(2)
        ok = b1.form_submit_button("Salvar", type="primary", disabled=state.saving)
        cancelar = b2.form_submit_button("Cancelar", disabled=state.saving)

    if cancelar:
        state.close_modal()
        st.rerun()

    if ok:
        form, errors = validate_form(ServiceForm, {
            "name": name, "price": price, "duration": duration, "status": status,
        })
        if errors:
            field_errors(errors, FIELD_LABELS)
            return
        # sem ID o webhook cria um novo serviço
        salvar(form.to_service(editing.id if editing else None),
               f"Serviço {'atualizado' if editing else 'salvo'} com sucesso.")


if st.button("➕ Adicionar serviço", type="primary"):
    state.open_create()
    st.rerun()

if state.modal in ("create", "edit"):
    with st.container(border=True):
        render_form(state.selected if state.modal == "edit" else None)
elif state.modal == "confirm" and state.selected is not None:
    alvo = state.selected
    with st.container(border=True):
        st.warning(f"Desativar o serviço **{alvo.name}**?")
        d1, d2 = st.columns(2)
        if d1.button("Desativar", type="primary", disabled=state.saving):
            salvar(dataclasses.replace(alvo, status="inactive"), "Serviço desativado com sucesso.")
        if d2.button("Voltar", disabled=state.saving):
            state.close_modal()
            st.rerun()

flush_write(state, "Não foi possível salvar o serviço. Tente novamente.")

st.divider()

f1, f2 = st.columns([2, 2])
ordenar_por = f1.selectbox("Ordenar por", ["—"] + list(SORT_KEYS))
direcao = f2.radio("Ordem", ["Crescente", "Decrescente"], horizontal=True)
lista = ordenar_registros(services, SORT_KEYS.get(ordenar_por), ascending=(direcao == "Crescente"))

if not lista:
    st.info("Nenhum serviço cadastrado.")
    st.stop()

df = to_dataframe(lista, {"name": "Serviço", "price": "Preço", "duration": "Duração (min)", "status": "Status"})
df["Preço"] = df["Preço"].map(fmt_brl)
df["Status"] = df["Status"].map(active_badge)
responsive_dataframe(df)

st.markdown("### ✏️ Ações")
for s in lista:
    c1, c2, c3 = st.columns([6, 1, 1])
    c1.write(f"**{s.name}** — {fmt_brl(s.price)} · {s.duration} min")
    if c2.button("Editar", key=key_for("edit", s.id)):
        state.open_edit(s)
        st.rerun()
    if c3.button("Desativar", key=key_for("off", s.id), disabled=s.status != "active"):
        state.open_confirm(s)
        st.rerun()
