"""
Paystack API client for the bank directory and account-name resolution
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class PaystackError(Exception):
    """Raised when Paystack cannot be reached or rejects a request"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class PaystackNotConfiguredError(PaystackError):
    """PAYSTACK_SECRET is not set"""


class PaystackClient:
    """Thin wrapper over the Paystack REST API"""

    def __init__(self, secret_key: Optional[str], base_url: str = "https://api.paystack.co", timeout: float = 10):
        if not secret_key:
            raise PaystackNotConfiguredError("PAYSTACK_SECRET is not configured")
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _make_request(self, method: str, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make HTTP request to Paystack API"""
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json"
        }

        try:
            if method == "GET":
                response = httpx.get(url, headers=headers, params=params, timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")
        except httpx.HTTPError as e:
            logger.error(f"Paystack API request to {endpoint} failed: {e}")
            raise PaystackError(f"Paystack request failed: {e}") from e

        if response.is_error:
            logger.warning(f"Paystack {endpoint} returned HTTP {response.status_code}")
            raise PaystackError(
                f"Paystack returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError:
            body = response.text

        return body if isinstance(body, dict) else {"status": False, "message": str(body)}

    def list_banks(self) -> List[Dict[str, Any]]:
        """All banks Paystack supports"""
        result = self._make_request("GET", "/bank")
        return result.get("data") or []

    def resolve_account(self, account_number: str, bank_code: str) -> Dict[str, Any]:
        """
        Look up the account holder's name

        Returns the raw Paystack body; callers check its "status" flag.
        """
        return self._make_request(
            "GET",
            "/bank/resolve",
            {"account_number": account_number, "bank_code": bank_code},
        )


def get_paystack_client() -> PaystackClient:
    """Build a client from configuration (raises PaystackNotConfiguredError)"""
    from ..config import config
    return PaystackClient(
        secret_key=config.PAYSTACK_SECRET,
        base_url=config.PAYSTACK_BASE_URL,
        timeout=config.PAYSTACK_TIMEOUT,
    )
