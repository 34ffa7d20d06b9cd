import pytest

from services import data_loader
from services.data_loader import flush_write, new_barber_id
from services.page_state import PageState
from webhook_service import FetchError


@pytest.fixture
def ui(monkeypatch):
    """Registra as chamadas de interface feitas por flush_write."""
    calls = {"toast": [], "error": [], "rerun": 0, "saved": []}

    def fake_save(method, *args):
        calls["saved"].append((method, args))

    def fake_rerun():
        calls["rerun"] += 1

    monkeypatch.setattr(data_loader, "save_and_refresh", fake_save)
    monkeypatch.setattr(data_loader.st, "toast", lambda msg: calls["toast"].append(msg))
    monkeypatch.setattr(data_loader.st, "error", lambda msg: calls["error"].append(msg))
    monkeypatch.setattr(data_loader.st, "rerun", fake_rerun)
    return calls


def test_sem_gravacao_pendente_nao_faz_nada(ui):
    state = PageState()
    assert flush_write(state, "erro") is False
    assert ui["saved"] == [] and ui["rerun"] == 0


def test_gravacao_com_sucesso_fecha_o_modal(ui):
    state = PageState()
    state.open_edit("barbeiro")
    state.begin_write(("save_barber", ("barbeiro",), "Barbeiro atualizado."))

    assert flush_write(state, "erro") is True
    assert ui["saved"] == [("save_barber", ("barbeiro",))]
    assert ui["toast"] == ["Barbeiro atualizado."]
    assert ui["rerun"] == 1
    assert state.modal == "closed"
    assert not state.saving


def test_falha_mantem_o_modal_aberto(ui, monkeypatch):
    def falha(method, *args):
        raise FetchError("Erro 500 em POST barbers", endpoint="barbers", status_code=500)

    monkeypatch.setattr(data_loader, "save_and_refresh", falha)
    state = PageState()
    state.open_edit("barbeiro")
    state.begin_write(("save_barber", ("barbeiro",), "ok"))

    assert flush_write(state, "Não foi possível salvar.") is False
    assert ui["error"] == ["Não foi possível salvar."]
    assert ui["rerun"] == 0
    assert state.modal == "edit"
    # botões liberados para nova tentativa
    assert not state.saving and state.pending is None


def test_new_barber_id(barbers):
    assert new_barber_id(barbers) == "3"
    assert new_barber_id([]) == "1"
