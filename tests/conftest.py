import json
import threading
from datetime import datetime, timedelta

import pytest
import requests

from services.gateway import BarbeariaGateway
from services.schemas import Appointment, Barber, Expense, Service
from webhook_service import WebhookService

BASE_URL = "https://webhook.test/webhook"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, raw=None):
        self.status_code = status_code
        if raw is not None:
            self.content = raw.encode()
        elif payload is None:
            self.content = b""
        else:
            self.content = json.dumps(payload).encode()
        self.text = self.content.decode()

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """
    Substituto de requests.Session: responde por (método, endpoint) e
    registra cada chamada em `calls`.
    """

    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def route(self, method, endpoint, payload=None, status=200, raw=None, exc=None):
        self.routes[(method, endpoint)] = (payload, status, raw, exc)

    def request(self, method, url, timeout=None, json=None, **kwargs):
        endpoint = url.rsplit("/", 1)[-1]
        with self._lock:
            self.calls.append({"method": method, "endpoint": endpoint, "json": json, "timeout": timeout})
        payload, status, raw, exc = self.routes.get((method, endpoint), (None, 404, "not found", None))
        if exc is not None:
            raise exc
        return FakeResponse(status, payload, raw)

    def posted(self, endpoint):
        return [c["json"] for c in self.calls if c["method"] == "POST" and c["endpoint"] == endpoint]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def webhook(session):
    return WebhookService(base_url=BASE_URL + "/", session=session)


@pytest.fixture
def gateway(webhook):
    return BarbeariaGateway(webhook)


@pytest.fixture
def network_error():
    return requests.exceptions.ConnectionError("conexão recusada")


# ---------------------------------------------------------
# Entidades de exemplo
# ---------------------------------------------------------
def make_appointment(
    start,
    minutes=30,
    status="pending",
    price=0.0,
    service="Corte",
    service_id="1",
    barber_id="1",
    barber="",
    payment_method=None,
    app_id="1",
):
    return Appointment(
        id=app_id,
        client_name="Cliente",
        client_phone="(11) 98765-4321",
        service_id=service_id,
        barber_id=barber_id,
        start=start,
        end=start + timedelta(minutes=minutes),
        service=service,
        barber=barber,
        status=status,
        price=price,
        payment_method=payment_method,
    )


@pytest.fixture
def services():
    return [
        Service(id="1", name="Corte", price=50.0, duration=45),
        Service(id="2", name="Barba", price=30.0, duration=30),
    ]


@pytest.fixture
def barbers():
    return [
        Barber(id="1", name="Carlos", specialty="Cortes", commission=20.0),
        Barber(id="2", name="Rafael", specialty="Barba", commission=0.0),
    ]


@pytest.fixture
def expense():
    return Expense(id="7", description="Conta de luz", amount=80.0, date=datetime(2024, 5, 10).date(),
                   category="Infraestrutura")


@pytest.fixture
def make_app():
    return make_appointment
