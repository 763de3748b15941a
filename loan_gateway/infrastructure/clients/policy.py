"""Policy source HTTP client for fetching the lending rules dataset at startup"""

import logging
import httpx
from loan_gateway.domain.policy import PolicyDataset, parse_policy_dataset
from loan_gateway.domain.exceptions import PolicySourceError
from loan_gateway.config import settings
from loan_gateway.infrastructure.observability.metrics import policy_fetch_failures_counter

logger = logging.getLogger(__name__)


class PolicyClient:
    """Client for a remote policy dataset published as JSON"""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.policy_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.transport = transport

    async def fetch_dataset(self) -> PolicyDataset:
        """
        Fetch and validate the policy dataset. Single attempt, no retries.

        Raises:
            PolicySourceError: On timeout, HTTP errors, or a non-JSON body
            ConfigurationError: If the fetched dataset is structurally invalid
        """
        if not self.url:
            raise PolicySourceError("No policy URL configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()

            except httpx.TimeoutException as e:
                policy_fetch_failures_counter.inc()
                raise PolicySourceError(f"Policy source timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                policy_fetch_failures_counter.inc()
                raise PolicySourceError(f"Policy source error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                policy_fetch_failures_counter.inc()
                raise PolicySourceError(f"Policy source unreachable: {e}") from e
            except ValueError as e:
                policy_fetch_failures_counter.inc()
                raise PolicySourceError(f"Policy source returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PolicySourceError("Policy source must return a JSON object")

        dataset = parse_policy_dataset(data)
        logger.info("Policy dataset loaded", extra={"policy_version": dataset.version, "source": self.url})
        return dataset
