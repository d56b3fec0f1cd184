from pydantic import BaseModel
from typing import Optional, Dict, Any, List, Union

from plan_execution import JSONRPC_VERSION


class RPCRequest(BaseModel):
    """JSON-RPC request received on /rpc."""
    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: Optional[Union[List[Any], Dict[str, Any]]] = None
    id: Optional[Union[int, str]] = None


class ToolInfo(BaseModel):
    """Public description of a registered tool."""
    name: str
    description: str
    input_schema: Dict[str, Any] = {}


class HealthResponse(BaseModel):
    status: str
    service: str
    tools: int
    runtime: bool
