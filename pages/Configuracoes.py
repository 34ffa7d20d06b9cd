import streamlit as st

from services.app_context import require_connection
from services.data_loader import flush_write, load_config
from services.forms import SettingsForm, validate_form
from services.page_state import get_page_state
from services.schemas import PAYMENT_METHODS, Config
from services.ui import field_errors, section

st.set_page_config(page_title="Configurações", page_icon="⚙️", layout="wide")
st.title("⚙️ Configurações")
st.caption("Dados da barbearia e preferências do atendimento automático.")

ctx = require_connection()
state = get_page_state("configuracoes")

FIELD_LABELS = {
    "shop_name": "Nome da barbearia",
    "phone": "Telefone principal",
    "address": "Endereço",
    "operating_hours": "Horário de funcionamento",
    "payment_methods": "Formas de pagamento",
}

state.start_loading()
with st.spinner("Carregando configurações..."):
    config = load_config(ctx["webhook_base_url"])
state.loaded()

if config is None:
    st.info("Nenhuma configuração salva ainda. Preencha os dados abaixo.")
    config = Config(shop_name="", phone="", address="", operating_hours="")

inicial = SettingsForm.from_config(config)

with st.form("configuracoes_form"):
    section("🏪 Dados da barbearia")
    c1, c2 = st.columns(2)
    shop_name = c1.text_input("Nome da barbearia", value=inicial["shop_name"])
    phone = c2.text_input("Telefone principal", value=inicial["phone"], placeholder="(99) 99999-9999")
    address = st.text_input("Endereço", value=inicial["address"])
    operating_hours = st.text_area(
        "Horário de funcionamento",
        value=inicial["operating_hours"],
        placeholder="Seg a Sex: 9h às 19h\nSáb: 9h às 14h",
    )

    section("💳 Formas de pagamento")
    payment_methods = st.multiselect(
        "Aceitas na barbearia",
        options=list(PAYMENT_METHODS),
        default=inicial["payment_methods"],
        format_func=lambda k: PAYMENT_METHODS[k],
    )

    section("🤖 Atendimento automático")
    audio_response = st.toggle("Responder com áudio", value=inicial["audio_response"])
    send_reactions = st.toggle("Enviar reações às mensagens", value=inicial["send_reactions"])

    salvar = st.form_submit_button("Salvar configurações", type="primary", disabled=state.saving)

if salvar:
    form, errors = validate_form(SettingsForm, {
        "shop_name": shop_name,
        "phone": phone,
        "address": address,
        "operating_hours": operating_hours,
        "payment_methods": payment_methods,
        "audio_response": audio_response,
        "send_reactions": send_reactions,
    })
    if errors:
        field_errors(errors, FIELD_LABELS)
        st.stop()

    state.begin_write(("save_config", (form.to_config(),), "Configurações salvas com sucesso."))
    st.rerun()

flush_write(state, "Não foi possível salvar as configurações. Tente novamente.")
