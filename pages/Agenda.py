import dataclasses
from datetime import date, datetime

import streamlit as st

from services.app_context import require_connection
from services.calendar_grid import (
    build_slots,
    build_week,
    on_appointment_click,
    on_empty_slot_click,
    reschedule_conflict,
    shift_week,
    week_grid,
)
from services.data_loader import flush_write, load_all
from services.finance_queries import agenda_semana
from services.forms import AppointmentForm, validate_form
from services.page_state import get_page_state
from services.schemas import PAYMENT_METHODS
from services.status import status_badge, status_style
from services.ui import field_errors
from services.utils import fmt_brl, fmt_datetime_br, fmt_weekday_br, key_for

st.set_page_config(page_title="Agenda", page_icon="📅", layout="wide")
st.title("📅 Agenda")
st.caption("Visualize e gerencie os agendamentos da semana.")

ctx = require_connection()
state = get_page_state("agenda")

FIELD_LABELS = {
    "client_name": "Nome do cliente",
    "client_phone": "Telefone",
    "service_id": "Serviço",
    "barber_id": "Barbeiro",
    "start": "Horário",
}

# --------------------------------------------------
# Navegação de semana
# --------------------------------------------------
anchor = st.session_state.setdefault("agenda_anchor", date.today())

n1, n2, n3, _ = st.columns([2, 2, 2, 6])
if n1.button("◀ Semana anterior", use_container_width=True):
    st.session_state["agenda_anchor"] = shift_week(anchor, -1)
    st.rerun()
if n2.button("Hoje", use_container_width=True):
    st.session_state["agenda_anchor"] = date.today()
    st.rerun()
if n3.button("Próxima semana ▶", use_container_width=True):
    st.session_state["agenda_anchor"] = shift_week(anchor, 1)
    st.rerun()

# --------------------------------------------------
# Dados
# --------------------------------------------------
state.start_loading()
try:
    with st.spinner("Carregando agenda..."):
        data = load_all(ctx["webhook_base_url"])
    state.loaded()
except RuntimeError as e:
    state.failed(str(e))
    st.error(str(e))
    st.stop()

services = data["services"]
barbers = data["barbers"]
week = build_week(anchor)
grid = week_grid(agenda_semana(data["appointments"], anchor), anchor)

payment_labels = list(PAYMENT_METHODS.values())


def _salvar(appointment, sucesso: str):
    """Gravação única (registro completo); roda no rerun seguinte com os botões desabilitados."""
    state.begin_write(("save_appointment", (appointment,), sucesso))
    st.rerun()


# --------------------------------------------------
# Modal: novo agendamento
# --------------------------------------------------
def render_create():
    st.markdown(f"#### ➕ Novo agendamento — {fmt_datetime_br(state.slot)}")
    ativos_s = [s for s in services if s.status == "active"]
    ativos_b = [b for b in barbers if b.status == "active"]

    with st.form("novo_agendamento"):
        c1, c2 = st.columns(2)
        client_name = c1.text_input("Nome do cliente", placeholder="Nome completo do cliente")
        client_phone = c2.text_input("Telefone", placeholder="(99) 99999-9999")

        c3, c4, c5 = st.columns(3)
        service = c3.selectbox(
            "Serviço", options=ativos_s, index=None,
            format_func=lambda s: f"{s.name} ({s.duration} min · {fmt_brl(s.price)})",
            placeholder="Selecione o serviço desejado",
        )
        barber = c4.selectbox(
            "Barbeiro", options=ativos_b, index=None,
            format_func=lambda b: b.name, placeholder="Selecione o barbeiro",
        )
        payment = c5.selectbox("Forma de pagamento", options=payment_labels, index=None, placeholder="Opcional")

        st.text_input("Horário", value=fmt_datetime_br(state.slot), disabled=True)

        b1, b2 = st.columns(2)
        salvar = b1.form_submit_button("Salvar agendamento", type="primary", disabled=state.saving)
        cancelar = b2.form_submit_button("Cancelar")

    if cancelar:
        state.close_modal()
        st.rerun()

    if salvar:
        form, errors = validate_form(AppointmentForm, {
            "client_name": client_name,
            "client_phone": client_phone,
            "service_id": service.id if service else "",
            "barber_id": barber.id if barber else "",
            "start": state.slot,
            "payment_method": payment,
        })
        if errors:
            field_errors(errors, FIELD_LABELS)
            return
        _salvar(form.to_appointment(services, barbers), "Agendamento criado com sucesso.")


# --------------------------------------------------
# Modal: detalhes (confirmar / cancelar / remarcar)
# --------------------------------------------------
def render_detail():
    app = state.selected
    st.markdown(f"#### 📋 Detalhes do agendamento — {status_badge(app.status)}")
    c1, c2, c3 = st.columns(3)
    c1.write(f"**Cliente:** {app.client_name}")
    c1.write(f"**Telefone:** {app.client_phone or '—'}")
    c2.write(f"**Serviço:** {app.service or '—'}")
    c2.write(f"**Barbeiro:** {app.barber or '—'}")
    c3.write(f"**Horário:** {fmt_datetime_br(app.start)} – {app.end.strftime('%H:%M')}")
    c3.write(f"**Valor:** {fmt_brl(app.price)}")

    tab_conf, tab_rem, tab_canc = st.tabs(["✅ Confirmar", "🔁 Remarcar", "🚫 Cancelar"])

    with tab_conf:
        atual = payment_labels.index(app.payment_method) if app.payment_method in payment_labels else None
        forma = st.selectbox("Forma de pagamento", payment_labels, index=atual, key=key_for("pag", app.id))
        if st.button("Confirmar", type="primary", disabled=state.saving, key=key_for("conf", app.id)):
            _salvar(dataclasses.replace(app, status="confirmed", payment_method=forma), "Agendamento confirmado.")

    with tab_rem:
        nova_data = st.date_input("Nova data", value=app.start.date(), format="DD/MM/YYYY", key=key_for("rd", app.id))
        mesma_semana = agenda_semana(data["appointments"], nova_data)

        def _rotulo(s):
            return s.strftime("%H:%M") + (" · ocupado" if reschedule_conflict(app, s, mesma_semana) else "")

        novo_slot = st.selectbox("Novo horário", build_slots(nova_data), format_func=_rotulo, key=key_for("rh", app.id))
        conflito = reschedule_conflict(app, novo_slot, mesma_semana)
        if conflito:
            st.warning(f"{app.barber or 'O barbeiro'} já tem agendamento nesse horário.")
        if st.button("Remarcar", disabled=state.saving or conflito, key=key_for("rem", app.id)):
            duracao = app.end - app.start
            _salvar(dataclasses.replace(app, start=novo_slot, end=novo_slot + duracao), "Agendamento remarcado.")

    with tab_canc:
        st.warning("O agendamento cancelado sai da agenda e dos relatórios.")
        if st.button("Cancelar agendamento", disabled=state.saving, key=key_for("canc", app.id)):
            _salvar(dataclasses.replace(app, status="canceled"), "Agendamento cancelado.")

    if st.button("Fechar"):
        state.close_modal()
        st.rerun()


if state.modal == "create" and state.slot:
    with st.container(border=True):
        render_create()
elif state.modal == "detail" and state.selected is not None:
    with st.container(border=True):
        render_detail()

flush_write(state, "Não foi possível salvar o agendamento. Tente novamente.")

# --------------------------------------------------
# Grade semanal
# --------------------------------------------------
st.subheader(f"Semana {week[0].strftime('%d/%m')} – {week[-1].strftime('%d/%m/%Y')}")

legenda = " ".join(
    f"<span style='background:{status_style(s)['bg']};color:{status_style(s)['fg']};"
    f"padding:2px 8px;border-radius:6px;margin-right:6px'>{status_badge(s)}</span>"
    for s in ("confirmed", "pending")
)
st.markdown(legenda, unsafe_allow_html=True)

WIDTHS = [1] + [2] * 7

head = st.columns(WIDTHS)
head[0].markdown("**🕘**")
for i, day in enumerate(week):
    head[i + 1].markdown(f"**{fmt_weekday_br(day)}**")

slots_ref = build_slots(anchor)
for row, slot_ref in enumerate(slots_ref, start=1):
    cols = st.columns(WIDTHS)
    cols[0].caption(slot_ref.strftime("%H:%M"))
    for i, day in enumerate(week):
        cell = cols[i + 1]
        entries = grid[day]
        starting = [(a, p) for a, p in entries if p.row_start == row]
        covering = any(p.row_start < row < p.row_start + p.row_span for _, p in entries)

        if starting:
            for app, place in starting:
                sty = status_style(app.status)
                cell.markdown(
                    f"<div style='background:{sty['bg']};color:{sty['fg']};border:1px solid {sty['border']};"
                    f"border-radius:8px;padding:4px 6px;font-size:0.8rem;min-height:{place.height_rem(2.2)}rem'>"
                    f"<b>{app.client_name}</b><br>{app.service}<br><small>{app.barber}</small></div>",
                    unsafe_allow_html=True,
                )
                if cell.button("Abrir", key=key_for("app", app.id, row, i), use_container_width=True):
                    intent = on_appointment_click(app)
                    state.open_detail(intent.appointment)
                    st.rerun()
        elif covering:
            cell.caption("┆")
        else:
            slot_dt = datetime.combine(day, slot_ref.time())
            if cell.button("＋", key=key_for("slot", day.isoformat(), row), use_container_width=True):
                intent = on_empty_slot_click(day, slot_dt)
                state.open_create(intent.start)
                st.rerun()

# --------------------------------------------------
# Fora da janela 09:00–19:00
# --------------------------------------------------
fora = [
    a for day in week for a, p in grid[day]
    if p.row_start < 1 or p.row_start > len(slots_ref)
]
if fora:
    with st.expander(f"⚠️ {len(fora)} agendamento(s) fora do horário da grade"):
        for a in fora:
            c1, c2 = st.columns([6, 1])
            c1.write(f"{fmt_datetime_br(a.start)} — {a.client_name} · {a.service} · {status_badge(a.status)}")
            if c2.button("Abrir", key=key_for("fora", a.id)):
                state.open_detail(on_appointment_click(a).appointment)
                st.rerun()
