# webhook_service.py
import logging
from typing import Any, Optional

import requests

logger = logging.getLogger("barbearia")
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class FetchError(RuntimeError):
    """Falha de comunicação com o webhook (HTTP não-2xx, rede ou JSON inválido)."""

    def __init__(self, message: str, endpoint: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class WebhookService:
    """
    Cliente HTTP do backend de webhooks da barbearia.

    Cada recurso é exposto em `{base_url}/{endpoint}`:
    GET lista os registros, POST faz upsert (com ou sem "ID").
    Não há política de retry: uma tentativa por requisição.
    """

    def __init__(
        self,
        base_url: str,
        request_timeout: float = 15,
        user_agent: str = "barbearia-painel-streamlit",
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("URL do webhook é obrigatória.")

        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": user_agent,
        })

        self.base_url = base_url.rstrip("/")
        self.timeout = request_timeout

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = self._url(endpoint)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Erro de rede em {method} {endpoint}: {e}", endpoint=endpoint) from e

        if not 200 <= resp.status_code < 300:
            raise FetchError(
                f"Erro {resp.status_code} em {method} {endpoint}: {resp.text[:200]}",
                endpoint=endpoint,
                status_code=resp.status_code,
            )
        return resp

    @staticmethod
    def _decode(resp: requests.Response, endpoint: str) -> Any:
        # n8n responde corpo vazio em alguns webhooks de escrita
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise FetchError(f"Resposta inválida de {endpoint}: {e}", endpoint=endpoint,
                             status_code=resp.status_code) from e

    def get_json(self, endpoint: str) -> Any:
        """GET no endpoint; retorna o JSON decodificado."""
        r = self._request("GET", endpoint)
        return self._decode(r, endpoint)

    def post_json(self, endpoint: str, payload: dict) -> Any:
        """POST (upsert) do registro completo; retorna o JSON de resposta (ou None)."""
        r = self._request("POST", endpoint, json=payload)
        return self._decode(r, endpoint)

    def delete_json(self, endpoint: str, payload: dict) -> Any:
        r = self._request("DELETE", endpoint, json=payload)
        return self._decode(r, endpoint)

