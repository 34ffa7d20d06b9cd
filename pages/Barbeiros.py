import dataclasses

import streamlit as st

from services.app_context import require_connection
from services.data_loader import flush_write, load_barbers, new_barber_id
from services.forms import BarberForm, validate_form
from services.page_state import get_page_state
from services.status import active_badge
from services.ui import field_errors, section
from services.utils import key_for, ordenar_registros

st.set_page_config(page_title="Barbeiros", page_icon="💇", layout="wide")
st.title("💇 Barbeiros")
st.caption("Gerencie os barbeiros da sua equipe.")

# --------------------------------------------------
# Contexto
# --------------------------------------------------
ctx = require_connection()
state = get_page_state("barbeiros")

FIELD_LABELS = {
    "name": "Nome",
    "specialty": "Especialidade",
    "commission": "Comissão (%)",
    "status": "Status",
}
SORT_KEYS = {"Nome": "name", "Especialidade": "specialty", "Status": "status", "Comissão (%)": "commission"}

state.start_loading()
with st.spinner("Carregando barbeiros..."):
    barbers = load_barbers(ctx["webhook_base_url"])

# sem a lista não dá para gerar o próximo ID: criar sobrescreveria o barbeiro 1
lista_indisponivel = barbers is None
if lista_indisponivel:
    state.failed("Não foi possível carregar a lista de barbeiros.")
    barbers = []
else:
    state.loaded()


# --------------------------------------------------
# Ações de gravação
# --------------------------------------------------
def salvar(barber, mensagem: str):
    state.begin_write(("save_barber", (barber,), mensagem))
    st.rerun()


def render_form(editing):
    titulo = f"✏️ Editar {editing.name}" if editing else "➕ Novo barbeiro"
    section(titulo)
    with st.form("barbeiro_form"):
        c1, c2, c3 = st.columns([3, 3, 2])
        name = c1.text_input("Nome", value=editing.name if editing else "")
        specialty = c2.text_input("Especialidade", value=editing.specialty if editing else "",
                                  placeholder="Ex.: Cortes clássicos, barba")
        commission = c3.number_input("Comissão (%)", min_value=0.0, max_value=100.0, step=1.0,
                                     value=float(editing.commission) if editing else 0.0)
        status = st.selectbox("Status", ["active", "inactive"], format_func=active_badge,
                              index=0 if not editing or editing.status == "active" else 1)
        notes = st.text_area("Observações", value=editing.notes if editing else "")

        b1, b2 = st.columns(2)
        ok = b1.form_submit_button("Salvar", type="primary", disabled=state.saving)
        cancelar = b2.form_submit_button("Cancelar", disabled=state.saving)

    if cancelar:
        state.close_modal()
        st.rerun()

    if ok:
        form, errors = validate_form(BarberForm, {
            "name": name,
            "specialty": specialty,
            "status": status,
            "notes": notes,
            "commission": commission,
        })
        if errors:
            field_errors(errors, FIELD_LABELS)
            return
        if not editing and lista_indisponivel:
            st.error("Lista de barbeiros indisponível: não é possível gerar o ID do novo barbeiro.")
            return
        barber_id = editing.id if editing else new_barber_id(barbers)
        salvar(form.to_barber(barber_id), f"Barbeiro {'atualizado' if editing else 'adicionado'} com sucesso.")


# --------------------------------------------------
# Cabeçalho / modal
# --------------------------------------------------
if lista_indisponivel:
    st.warning("Não foi possível carregar os barbeiros. Cadastro de novos barbeiros desabilitado até a lista voltar.")
    if st.button("🔄 Tentar novamente"):
        st.cache_data.clear()
        st.rerun()

if st.button("➕ Adicionar barbeiro", type="primary", disabled=lista_indisponivel or state.saving):
    state.open_create()
    st.rerun()

if state.modal in ("create", "edit"):
    with st.container(border=True):
        render_form(state.selected if state.modal == "edit" else None)
elif state.modal == "confirm" and state.selected is not None:
    alvo = state.selected
    with st.container(border=True):
        st.warning(f"Desativar **{alvo.name}**? Ele deixará de aparecer para novos agendamentos.")
        d1, d2 = st.columns(2)
        if d1.button("Desativar", type="primary", disabled=state.saving):
            salvar(dataclasses.replace(alvo, status="inactive"), "Barbeiro desativado com sucesso.")
        if d2.button("Voltar", disabled=state.saving):
            state.close_modal()
            st.rerun()

flush_write(state, "Não foi possível salvar o barbeiro. Tente novamente.")

st.divider()

# --------------------------------------------------
# Tabela ordenável
# --------------------------------------------------
f1, f2, f3 = st.columns([3, 2, 2])
busca = f1.text_input("Buscar por nome")
ordenar_por = f2.selectbox("Ordenar por", ["—"] + list(SORT_KEYS))
direcao = f3.radio("Ordem", ["Crescente", "Decrescente"], horizontal=True)

lista = [b for b in barbers if not busca or busca.lower() in b.name.lower()]
lista = ordenar_registros(lista, SORT_KEYS.get(ordenar_por), ascending=(direcao == "Crescente"))

if not lista:
    st.info("Nenhum barbeiro encontrado.")
    st.stop()

WIDTHS = [3, 3, 2, 2, 3, 3]
h = st.columns(WIDTHS)
for col, titulo in zip(h, ["**Nome**", "**Especialidade**", "**Comissão**", "**Status**", "**Observações**", ""]):
    col.markdown(titulo)

for b in lista:
    c = st.columns(WIDTHS)
    c[0].write(b.name)
    c[1].write(b.specialty or "—")
    c[2].write(f"{b.commission:g}%")
    c[3].write(active_badge(b.status))
    c[4].write(b.notes or "—")
    a1, a2 = c[5].columns(2)
    if a1.button("Editar", key=key_for("edit", b.id)):
        state.open_edit(b)
        st.rerun()
    if a2.button("Desativar", key=key_for("off", b.id), disabled=b.status != "active"):
        state.open_confirm(b)
        st.rerun()
