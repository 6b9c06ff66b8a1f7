"""
Automatic hosting server discovery.

Clients without an assigned server are looked up by customer number on every
server with Froxlor credentials. A failing server is recorded and skipped.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from agency.models import Client, Server
from agency.services.froxlor import FroxlorClient, client_from_server

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Server], Optional[FroxlorClient]]


@dataclass
class ProbeResult:
    server_id: Any
    server_name: str
    customer: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.customer is not None


def probe_all(
    servers: Iterable[Server],
    customer_no: str,
    client_factory: ClientFactory = client_from_server,
    stop_on_match: bool = False,
) -> List[ProbeResult]:
    """Look the customer up on each server; one result per probed server."""
    results: List[ProbeResult] = []
    for server in servers:
        froxlor = client_factory(server)
        if froxlor is None:
            continue
        try:
            customer = froxlor.search_customer(customer_no)
            result = ProbeResult(server_id=server.id, server_name=server.name, customer=customer)
        except Exception as e:
            logger.error(
                "Error checking server %s for customer %s: %s", server.name, customer_no, e,
                extra={"server_id": str(server.id), "customer_no": customer_no},
            )
            result = ProbeResult(server_id=server.id, server_name=server.name, error=str(e))
        results.append(result)
        if stop_on_match and result.found:
            break
    return results


def servers_with_froxlor(db: Session) -> List[Server]:
    return (
        db.query(Server)
        .filter(
            Server.froxlor_url.isnot(None),
            Server.froxlor_api_key.isnot(None),
            Server.froxlor_api_secret.isnot(None),
        )
        .order_by(Server.name)
        .all()
    )


def assign_server(db: Session, client: Client, client_factory: ClientFactory = client_from_server) -> Optional[Server]:
    """
    Assign the first server that knows the client's customer number.
    Returns the assigned server, or None if nothing was assigned.
    """
    if client.server_id or not client.customer_no:
        return None

    servers = servers_with_froxlor(db)
    results = probe_all(servers, client.customer_no, client_factory, stop_on_match=True)
    match = next((r for r in results if r.found), None)
    if match is None:
        return None

    server = next(s for s in servers if s.id == match.server_id)
    client.server_id = server.id
    db.commit()
    db.refresh(client)
    logger.info(
        "Auto-assigned server %s to client %s (%s)", server.name, client.name, client.customer_no,
        extra={"client_id": str(client.id), "server_id": str(server.id)},
    )
    return server
