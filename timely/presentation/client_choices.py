"""
Client spinner entries shared by the clock and export screens.
No Kivy imports here, so the mapping is usable from tests and scripts.
"""
from ..services.report_service import format_money

NO_CLIENT = "Choose a client..."


def client_label(client) -> str:
    """'Acme ($50.00/h) #3'; the id keeps labels unique when name and rate repeat"""
    return f"{client.name} ({format_money(client.hourly_rate)}/h) #{client.id}"


def client_choices(clients) -> dict:
    """Spinner label -> client, in the order given"""
    return {client_label(client): client for client in clients}
