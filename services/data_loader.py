from typing import Optional

import streamlit as st

from services.app_context import get_context, get_gateway
from services.page_state import PageState
from services.schemas import Barber
from services.mappers import next_numeric_id
from webhook_service import FetchError


def _gateway_for(cache_key: str):
    ctx = get_context()
    if not ctx.get("connected"):
        raise RuntimeError("Webhook não configurado. Informe a URL na barra lateral.")
    return get_gateway()


@st.cache_data(ttl=60, show_spinner=False)
def load_all(cache_key: str) -> dict:
    """
    Lê serviços, barbeiros, agenda e despesas em paralelo.
    `cache_key` é a URL do webhook: trocar de backend invalida o cache.
    """
    return _gateway_for(cache_key).load_dashboard()


@st.cache_data(ttl=60, show_spinner=False)
def load_services(cache_key: str):
    return _gateway_for(cache_key).list_services()


@st.cache_data(ttl=60, show_spinner=False)
def load_barbers(cache_key: str) -> Optional[list[Barber]]:
    """None quando /barbers falhou (a página não deve criar IDs sobre uma lista vazia)."""
    return _gateway_for(cache_key).list_barbers(strict=True)


@st.cache_data(ttl=60, show_spinner=False)
def load_config(cache_key: str):
    return _gateway_for(cache_key).get_config()


# ---------- Escrita: grava e força recarga completa ----------
def save_and_refresh(method: str, *args):
    """
    Executa `gateway.<method>(*args)` e limpa o cache de leituras.
    Propaga FetchError para a página mostrar o erro.
    """
    result = getattr(get_gateway(), method)(*args)
    st.cache_data.clear()
    return result


def flush_write(state: PageState, error_message: str) -> bool:
    """
    Executa a gravação pendente da página (marcada por `state.begin_write`).

    Sucesso: fecha o modal, avisa e reroda. Falha: mostra `error_message`
    e mantém o modal aberto para nova tentativa. Retorna False se não havia
    gravação pendente ou se ela falhou.
    """
    pending = state.take_pending()
    if pending is None:
        return False
    method, args, success_message = pending
    try:
        save_and_refresh(method, *args)
    except FetchError:
        st.error(error_message)
        return False
    finally:
        state.end_write()
    state.close_modal()
    st.toast(success_message)
    st.rerun()
    return True


def new_barber_id(barbers: list[Barber]) -> str:
    return next_numeric_id(b.id for b in barbers)
