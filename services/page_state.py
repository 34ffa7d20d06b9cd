"""
Estado de página explícito (período, modal aberto, carregamento, escrita em curso).

Transições:
    carga:  idle -> loading -> loaded | error
    modal:  closed -> create | detail | edit | confirm -> closed
    escrita: uma por vez; `begin_write` marca a gravação como pendente (botões
             desabilitados no rerun seguinte) e falha se já houver outra em curso
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import streamlit as st

LOAD_STATES = ("idle", "loading", "loaded", "error")
MODAL_KINDS = ("closed", "create", "detail", "edit", "confirm")


class InvalidTransition(RuntimeError):
    pass


@dataclass
class PageState:
    load: str = "idle"
    error: Optional[str] = None
    modal: str = "closed"
    selected: Any = None  # entidade em detalhe/edição
    slot: Optional[datetime] = None  # horário fixo do novo agendamento
    saving: bool = False
    pending: Optional[tuple] = None  # gravação aguardando o próximo rerun

    # ----------------- carga -----------------
    def start_loading(self) -> None:
        self.load = "loading"
        self.error = None

    def loaded(self) -> None:
        if self.load != "loading":
            raise InvalidTransition(f"loaded() a partir de '{self.load}'")
        self.load = "loaded"

    def failed(self, message: str) -> None:
        if self.load != "loading":
            raise InvalidTransition(f"failed() a partir de '{self.load}'")
        self.load = "error"
        self.error = message

    # ----------------- modal -----------------
    def open_create(self, slot: Optional[datetime] = None) -> None:
        self.modal = "create"
        self.selected = None
        self.slot = slot

    def open_detail(self, entity: Any) -> None:
        self.modal = "detail"
        self.selected = entity
        self.slot = None

    def open_edit(self, entity: Any) -> None:
        self.modal = "edit"
        self.selected = entity
        self.slot = None

    def open_confirm(self, entity: Any) -> None:
        """Diálogo de confirmação (ex.: desativar barbeiro/serviço)."""
        self.modal = "confirm"
        self.selected = entity
        self.slot = None

    def close_modal(self) -> None:
        self.modal = "closed"
        self.selected = None
        self.slot = None

    # ----------------- escrita -----------------
    def begin_write(self, action: tuple) -> None:
        """
        Marca a gravação `(método do gateway, args, mensagem de sucesso)` como pendente.
        Ela roda no rerun seguinte, com os botões de envio já desabilitados.
        """
        if self.saving:
            raise InvalidTransition("Já existe uma gravação em andamento.")
        self.saving = True
        self.pending = action

    def take_pending(self) -> Optional[tuple]:
        action, self.pending = self.pending, None
        return action

    def end_write(self) -> None:
        self.saving = False
        self.pending = None


def get_page_state(page: str) -> PageState:
    """Estado da página guardado no session_state (criado na primeira visita)."""
    key = f"page_state::{page}"
    if key not in st.session_state:
        st.session_state[key] = PageState()
    return st.session_state[key]
