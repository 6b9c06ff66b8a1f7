"""
Froxlor hosting panel API client.
https://docs.froxlor.org/latest/api-guide/

Froxlor 2.x authenticates with HTTP Basic auth; 1.x expects the key and secret
inside the JSON body. Both answer on <url>/api.php.
"""
import logging
import re
from typing import Any, Dict, List, Optional

import requests

from agency.config import settings

logger = logging.getLogger(__name__)

LEGACY_VERSION = "1.x"
_INVALID_CREDENTIAL_CHARS = re.compile(r"[\r\n\0]")
# Credential problems are expected on half-configured servers and not worth an error log
_QUIET_ERRORS = ("Invalid request header", "API credentials", "API key and secret")


class FroxlorError(Exception):
    """Raised when the Froxlor API cannot be reached or rejects a call."""


def normalize_listing(payload: Any) -> List[Dict[str, Any]]:
    """Froxlor returns listings as {"list": [...]}, a plain list or an id-keyed mapping."""
    if not payload:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("list"), list):
            return payload["list"]
        return list(payload.values())
    return []


def to_numeric_id(value: Any) -> Optional[int]:
    try:
        return int(str(value if value is not None else "").strip())
    except ValueError:
        return None


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value)


def matches_customer_number(customer: Dict[str, Any], customer_number: str) -> bool:
    """
    Match on customer number or login name. Numeric input also matches prefixed
    login names ("25065" -> "E25065"), prefixed input matches on its digits.
    """
    clean = customer_number.strip().upper()
    numeric = _digits(clean)
    customer_num = str(customer.get("customernumber") or "").strip().upper()
    login_name = str(customer.get("loginname") or "").strip().upper()

    if clean and (customer_num == clean or login_name == clean):
        return True
    if not numeric:
        return False
    if numeric == clean:
        return _digits(login_name) == numeric
    return _digits(login_name) == numeric or _digits(customer_num) == numeric


class FroxlorClient:
    def __init__(
        self,
        url: str,
        api_key: str,
        api_secret: str,
        version: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.api_secret = api_secret
        self.version = version or settings.FROXLOR_DEFAULT_VERSION
        self.timeout = timeout or settings.FROXLOR_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def api_url(self) -> str:
        return f"{self.url.rstrip('/')}/api.php"

    @property
    def is_legacy(self) -> bool:
        return self.version == LEGACY_VERSION

    def _request(self, command: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = params or {}
        if self.is_legacy:
            body = {
                "header": {"apikey": self.api_key, "secret": self.api_secret},
                "body": {"command": command, "params": params},
            }
            auth = None
        else:
            api_key = (self.api_key or "").strip()
            api_secret = (self.api_secret or "").strip()
            if not api_key or not api_secret:
                raise FroxlorError("API key and secret are required for authentication")
            if _INVALID_CREDENTIAL_CHARS.search(api_key) or _INVALID_CREDENTIAL_CHARS.search(api_secret):
                raise FroxlorError("API credentials contain invalid characters (newlines or null bytes)")
            body = {"command": command, "params": params}
            auth = (api_key, api_secret)

        try:
            response = self.session.post(self.api_url, json=body, auth=auth, timeout=self.timeout)
        except requests.Timeout as e:
            raise FroxlorError(f"Froxlor API request timeout ({self.timeout}s)") from e
        except requests.ConnectionError as e:
            raise FroxlorError(f"Connection to {self.api_url} failed - check URL and network") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if not response.ok:
            message = payload.get("status_message") or payload.get("message") or response.reason
            raise FroxlorError(f"HTTP {response.status_code}: {message}")
        return payload

    def _listing(self, command: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        payload = self._request(command, params)
        return normalize_listing(payload.get("data"))

    def test_connection(self) -> Dict[str, Any]:
        try:
            result = self._request("Froxlor.listFunctions")
        except FroxlorError as e:
            return {"success": False, "message": str(e)}

        if self.is_legacy:
            ok = result.get("status") == 200
        else:
            ok = result.get("data") is not None
        if ok:
            return {"success": True, "message": "Verbindung erfolgreich"}
        return {"success": False, "message": result.get("status_message") or "Unbekannter Fehler"}

    def search_customer(self, customer_number: str) -> Optional[Dict[str, Any]]:
        """Search all customers for a number. Raises FroxlorError if the panel fails."""
        for customer in self._listing("Customers.listing"):
            if matches_customer_number(customer, customer_number):
                # The listing omits some fields (imap, pop3), so reload the full record
                full = self.get_customer(to_numeric_id(customer.get("customerid")))
                return full or customer
        return None

    def find_customer_by_number(self, customer_number: str) -> Optional[Dict[str, Any]]:
        try:
            return self.search_customer(customer_number)
        except FroxlorError as e:
            if not any(marker in str(e) for marker in _QUIET_ERRORS):
                logger.error("Error finding Froxlor customer: %s", e, extra={"customer_no": customer_number})
            return None

    def get_customer(self, customer_id: Optional[int]) -> Optional[Dict[str, Any]]:
        if customer_id is None:
            return None
        try:
            result = self._request("Customers.get", {"id": customer_id})
        except FroxlorError as e:
            logger.error("Error getting Froxlor customer %s: %s", customer_id, e)
            return None
        return result.get("data") or None

    def get_customer_domains(self, customer_id: Any) -> List[Dict[str, Any]]:
        target_id = to_numeric_id(customer_id)
        try:
            domains = self._listing("Domains.listing", {"customerid": target_id if target_id is not None else customer_id})
        except FroxlorError as e:
            logger.error("Error getting customer domains: %s", e)
            return []
        if target_id is None:
            return domains
        # The API may return every domain despite the customer filter
        return [d for d in domains if to_numeric_id(d.get("customerid")) == target_id]

    def get_customer_ftp_accounts(self, customer_id: int) -> List[Dict[str, Any]]:
        try:
            return self._listing("Ftps.listing", {"customerid": customer_id})
        except FroxlorError as e:
            logger.error("Error fetching FTP accounts: %s", e)
            return []

    def get_customer_databases(self, customer_id: int) -> List[Dict[str, Any]]:
        try:
            return self._listing("Mysqls.listing", {"customerid": customer_id})
        except FroxlorError as e:
            logger.error("Error getting customer databases: %s", e)
            return []

    def update_ftp_password(self, ftp_id: int, customer_id: int, new_password: str) -> Dict[str, Any]:
        try:
            self._request("Ftps.update", {"id": ftp_id, "customerid": customer_id, "ftp_password": new_password})
        except FroxlorError as e:
            return {"success": False, "message": str(e)}
        return {"success": True, "message": "FTP-Passwort erfolgreich aktualisiert"}


def client_from_server(server: Any) -> Optional[FroxlorClient]:
    """Client for a Server row, or None when its Froxlor credentials are incomplete."""
    if not (server.froxlor_url and server.froxlor_api_key and server.froxlor_api_secret):
        return None
    return FroxlorClient(
        url=server.froxlor_url,
        api_key=server.froxlor_api_key,
        api_secret=server.froxlor_api_secret,
        version=server.froxlor_version or None,
    )
