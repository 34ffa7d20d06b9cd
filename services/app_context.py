import os

import streamlit as st

from services.gateway import BarbeariaGateway
from webhook_service import WebhookService, logger

DEFAULT_BASE_URL = "https://n8n.mailizjoias.com.br/webhook"
DEFAULT_TIMEOUT = 15.0


def _secret(key: str, default=None):
    """st.secrets sem secrets.toml levanta FileNotFoundError; trata como ausente."""
    try:
        return st.secrets.get(key, default)
    except FileNotFoundError:
        return default


def resolve_base_url() -> str:
    """st.secrets -> BARBEARIA_WEBHOOK_URL -> padrão."""
    return (
        _secret("webhook_base_url")
        or os.environ.get("BARBEARIA_WEBHOOK_URL")
        or DEFAULT_BASE_URL
    )


def resolve_timeout() -> float:
    raw = _secret("webhook_timeout") or os.environ.get("BARBEARIA_WEBHOOK_TIMEOUT")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT
    except (TypeError, ValueError):
        logger.warning(f"Timeout inválido '{raw}', usando {DEFAULT_TIMEOUT}s.")
        return DEFAULT_TIMEOUT


def connect(base_url: str) -> BarbeariaGateway:
    """Cria o gateway para `base_url` e marca a sessão como conectada."""
    ss = st.session_state
    ws = WebhookService(base_url=base_url, request_timeout=resolve_timeout())
    ss["webhook_base_url"] = ws.base_url
    ss["gateway"] = BarbeariaGateway(ws)
    ss["connected"] = True
    return ss["gateway"]


def init_context():
    """
    Inicializa o estado de sessão do Streamlit.

    - Lê a URL do webhook (secrets / ambiente / padrão).
    - Cria o BarbeariaGateway se ainda não existir.
    - Marca 'connected' no session_state para guiar o fluxo das páginas.
    """
    ss = st.session_state
    ss["webhook_base_url"] = ss.get("webhook_base_url", resolve_base_url())

    if ss.get("gateway") is None and ss["webhook_base_url"]:
        try:
            connect(ss["webhook_base_url"])
        except ValueError as e:
            ss["gateway"] = None
            ss["connected"] = False
            ss["gateway_error"] = str(e)
    else:
        ss["connected"] = ss.get("gateway") is not None


def get_context():
    """
    Retorna o session_state sem mutações.
    Garanta que init_context() foi chamado no início de cada página.
    """
    return st.session_state


def get_gateway() -> BarbeariaGateway:
    gw = st.session_state.get("gateway")
    if gw is None:
        raise RuntimeError("Gateway não inicializado. Chame init_context() antes.")
    return gw


def require_connection():
    """Interrompe a página quando não há webhook configurado."""
    init_context()
    ctx = get_context()
    if not ctx.get("connected"):
        st.warning("Configure a URL do webhook na página principal.")
        st.stop()
    return ctx
