"""
JSON-RPC client for the Docker planner server.

Provides methods to:
- Call any ``Server.*`` method and unwrap its envelope
- Generate a plan from an instruction and apply it
"""

import asyncio
import logging
import sys
from itertools import count
from typing import Any, Dict, List, Optional

import httpx

from config import get_settings
from plan_execution import JSONRPC_VERSION, Envelope, EnvelopeError

logger = logging.getLogger(__name__)


class RPCClientError(Exception):
    """Error envelope returned by the server."""

    def __init__(self, error: EnvelopeError):
        super().__init__(str(error))
        self.code = error.code
        self.message = error.message


class RPCClient:
    """Async JSON-RPC over HTTP client."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.endpoint = endpoint or settings.rpc_endpoint
        self.timeout = timeout or settings.client_timeout_seconds
        self._client = client
        self._ids = count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, *params: Any) -> Any:
        """
        Perform a JSON-RPC call and return the result payload.

        Raises:
            RPCClientError: The server answered with an error envelope
            httpx.HTTPError: Transport failure
        """
        request = {
            "jsonrpc": JSONRPC_VERSION,
            "method": method,
            "params": list(params),
            "id": next(self._ids),
        }
        client = await self._get_client()
        response = await client.post(self.endpoint, json=request)
        response.raise_for_status()

        logger.debug(f"Raw JSON-RPC response: {response.text}")
        envelope = Envelope.model_validate(response.json())
        if envelope.error is not None:
            raise RPCClientError(envelope.error)
        return envelope.result

    async def generate_plan(self, instruction: str) -> str:
        return await self.call("Server.CallLLM", instruction)

    async def execute_plan(self, plan_json: str) -> Dict[str, Any]:
        return await self.call("Server.ExecutePlan", plan_json)

    async def call_tool(self, tool_name: str, parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.call("Server.CallTool", {"tool_name": tool_name, "parameters": parameters or {}})

    async def list_tools(self) -> List[Dict[str, Any]]:
        return await self.call("Server.ListTools")

    async def plan_and_apply(self, instruction: str) -> Dict[str, Any]:
        """Generate a plan for ``instruction`` and execute it."""
        plan_json = await self.generate_plan(instruction)
        logger.info(f"Received plan from LLM: {plan_json}")
        return await self.execute_plan(plan_json)


async def _main(instruction: str) -> int:
    client = RPCClient()
    try:
        result = await client.plan_and_apply(instruction)
    except RPCClientError as e:
        print(f"Plan failed: {e}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"Could not reach {client.endpoint}: {e}", file=sys.stderr)
        return 1
    finally:
        await client.close()

    print(f"Plan execution result: status={result['status']}, message={result['message']}")
    return 0


def main() -> None:
    """Entry point: ``docker-planner-client <instruction...>``."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    instruction = " ".join(sys.argv[1:]).strip()
    if not instruction:
        print("usage: docker-planner-client <instruction>", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(_main(instruction)))


if __name__ == "__main__":
    main()
