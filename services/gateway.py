import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from services.mappers import (
    api_to_appointment,
    api_to_barber,
    api_to_config,
    api_to_expense,
    api_to_service,
    appointment_to_api,
    barber_to_api,
    config_to_api,
    expense_to_api,
    map_rows,
    service_to_api,
    wire_id,
)
from services.schemas import Appointment, Barber, Config, Expense, Service
from webhook_service import FetchError, WebhookService

logger = logging.getLogger("barbearia")

SERVICOS = "servicos"
BARBEIROS = "barbers"
AGENDA = "agenda"
CONFIG = "config"
DESPESAS = "despesas"


class BarbeariaGateway:
    """
    Camada entre o webhook e as entidades internas.

    - Leituras (`list_*`, `get_config`) nunca propagam falha: registram o erro
      e devolvem coleção vazia / None para a página renderizar o estado vazio.
    - Escritas (`save_*`, `delete_expense`) propagam `FetchError` para a página
      exibir o erro e manter o formulário aberto.
    - `save_*` é upsert: com `id` atualiza, sem `id` cria (mesmo POST).
    """

    def __init__(self, service: WebhookService):
        self.ws = service

    # ----------------- leitura -----------------
    def _get_rows(self, endpoint: str):
        try:
            return self.ws.get_json(endpoint)
        except FetchError as e:
            logger.warning(f"Falha ao listar /{endpoint}: {e}")
            return None

    def list_services(self) -> list[Service]:
        return map_rows(self._get_rows(SERVICOS), api_to_service, "servicos")

    def list_barbers(self, strict: bool = False) -> Optional[list[Barber]]:
        """
        Com `strict=True`, uma leitura que falhou devolve None em vez de [],
        para quem precisa distinguir "sem barbeiros" de "lista indisponível".
        """
        rows = self._get_rows(BARBEIROS)
        if rows is None and strict:
            return None
        return map_rows(rows, api_to_barber, "barbers")

    def list_expenses(self) -> list[Expense]:
        return map_rows(self._get_rows(DESPESAS), api_to_expense, "despesas")

    def list_appointments(self, services: Optional[list[Service]] = None) -> list[Appointment]:
        """
        Lista /agenda juntando com o catálogo de serviços (preço e duração).
        Sem `services`, busca /agenda e /servicos em paralelo.
        """
        if services is None:
            with ThreadPoolExecutor(max_workers=2) as pool:
                f_agenda = pool.submit(self._get_rows, AGENDA)
                f_services = pool.submit(self.list_services)
                rows, services = f_agenda.result(), f_services.result()
        else:
            rows = self._get_rows(AGENDA)

        by_id = {s.id: s for s in services}
        return map_rows(rows, lambda r: api_to_appointment(r, by_id), "agenda")

    def get_config(self) -> Optional[Config]:
        return api_to_config(self._get_rows(CONFIG))

    def load_dashboard(self) -> dict:
        """Fan-out/fan-in das leituras independentes de uma página."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            f_rows = {
                SERVICOS: pool.submit(self._get_rows, SERVICOS),
                BARBEIROS: pool.submit(self._get_rows, BARBEIROS),
                AGENDA: pool.submit(self._get_rows, AGENDA),
                DESPESAS: pool.submit(self._get_rows, DESPESAS),
            }
            rows = {k: f.result() for k, f in f_rows.items()}

        services = map_rows(rows[SERVICOS], api_to_service, "servicos")
        by_id = {s.id: s for s in services}
        return {
            "services": services,
            "barbers": map_rows(rows[BARBEIROS], api_to_barber, "barbers"),
            "appointments": map_rows(rows[AGENDA], lambda r: api_to_appointment(r, by_id), "agenda"),
            "expenses": map_rows(rows[DESPESAS], api_to_expense, "despesas"),
        }

    # ----------------- escrita -----------------
    def _post(self, endpoint: str, body: dict, label: str):
        try:
            resp = self.ws.post_json(endpoint, body)
        except FetchError:
            logger.error(f"Falha ao salvar {label} em /{endpoint}: ID={body.get('ID')}")
            raise
        logger.info(f"{label} salvo em /{endpoint}: ID={body.get('ID', 'novo')}")
        return resp

    def save_service(self, service: Service) -> Service:
        self._post(SERVICOS, service_to_api(service), "Serviço")
        return service

    def save_barber(self, barber: Barber) -> Barber:
        self._post(BARBEIROS, barber_to_api(barber), "Barbeiro")
        return barber

    def save_appointment(self, appointment: Appointment) -> Appointment:
        self._post(AGENDA, appointment_to_api(appointment), "Agendamento")
        return appointment

    def save_expense(self, expense: Expense) -> Expense:
        self._post(DESPESAS, expense_to_api(expense), "Despesa")
        return expense

    def save_config(self, config: Config) -> Config:
        self._post(CONFIG, config_to_api(config), "Configuração")
        return config

    def delete_expense(self, expense_id: str) -> None:
        try:
            self.ws.delete_json(DESPESAS, {"ID": wire_id(expense_id)})
        except FetchError:
            logger.error(f"Falha ao excluir despesa {expense_id}")
            raise
        logger.info(f"Despesa excluída: ID={expense_id}")
