import pytest

from webhook_service import FetchError, WebhookService


def test_base_url_obrigatoria():
    with pytest.raises(ValueError):
        WebhookService(base_url="")


def test_url_sem_barra_duplicada(webhook):
    assert webhook._url("/servicos") == "https://webhook.test/webhook/servicos"


def test_get_json_decodifica(session, webhook):
    session.route("GET", "servicos", payload=[{"ID": 1, "Nome": "Corte"}])
    assert webhook.get_json("servicos") == [{"ID": 1, "Nome": "Corte"}]
    assert session.calls[0]["timeout"] == 15


def test_headers_da_sessao(session, webhook):
    assert session.headers["Accept"] == "application/json"
    assert session.headers["User-Agent"] == "barbearia-painel-streamlit"


def test_status_nao_2xx_vira_fetch_error(session, webhook):
    session.route("GET", "agenda", status=500, raw="erro interno")
    with pytest.raises(FetchError) as exc:
        webhook.get_json("agenda")
    assert exc.value.status_code == 500
    assert exc.value.endpoint == "agenda"


def test_erro_de_rede_vira_fetch_error(session, webhook, network_error):
    session.route("GET", "agenda", exc=network_error)
    with pytest.raises(FetchError) as exc:
        webhook.get_json("agenda")
    assert exc.value.status_code is None


def test_json_invalido(session, webhook):
    session.route("GET", "config", raw="<html>")
    with pytest.raises(FetchError):
        webhook.get_json("config")


def test_corpo_vazio_retorna_none(session, webhook):
    session.route("POST", "despesas", payload=None)
    assert webhook.post_json("despesas", {"Descricao": "x"}) is None
    assert session.posted("despesas") == [{"Descricao": "x"}]
