import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from config import Settings, get_settings
from llm_client import LLMClient, get_llm_client
from models import RPCRequest, ToolInfo
from plan_execution import (
    Envelope,
    ErrorCode,
    InvalidParametersError,
    PlanExecutionError,
    PlanExecutor,
    ResultNormalizer,
    ToolCallArgs,
    ToolRegistry,
    build_default_registry,
)
from prompts import PromptRegistry
from runtime import ContainerRuntime, ContainerRuntimeError, create_runtime

logger = logging.getLogger(__name__)

Params = Optional[Union[List[Any], Dict[str, Any]]]
RPCMethod = Callable[[Params], Awaitable[Envelope]]


def _param(params: Params, name: str, index: int = 0) -> Any:
    """Read a named (object params) or positional (array params) argument."""
    if isinstance(params, dict):
        return params.get(name)
    if isinstance(params, list) and len(params) > index:
        return params[index]
    return None


class Server:
    """JSON-RPC method table for the Docker planner.

    Methods are addressed as ``Server.<Name>``, the names the RPC client uses.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        runtime: ContainerRuntime,
        executor: PlanExecutor,
        llm: Optional[LLMClient] = None,
        prompts: Optional[PromptRegistry] = None,
    ):
        self.registry = registry
        self.runtime = runtime
        self.executor = executor
        self.llm = llm
        self.prompts = prompts
        self._normalizer = ResultNormalizer()
        self._methods: Dict[str, RPCMethod] = {
            "Server.CallLLM": self.call_llm,
            "Server.ExecutePlan": self.execute_plan,
            "Server.CallTool": self.call_tool,
            "Server.ListTools": self.list_tools,
            "Server.ListPrompts": self.list_prompts,
            "Server.GetPrompt": self.get_prompt,
        }

    @property
    def method_names(self) -> List[str]:
        return list(self._methods)

    async def dispatch(self, request: RPCRequest) -> Envelope:
        """Route a request to its method and stamp the request id on the reply."""
        method = self._methods.get(request.method)
        if method is None:
            logger.warning(f"Unknown RPC method: {request.method}")
            return self._normalizer.error(
                ErrorCode.METHOD_NOT_FOUND,
                f"method not found: {request.method}",
                request.id,
            )

        try:
            envelope = await method(request.params)
        except PlanExecutionError as e:
            envelope = self._normalizer.from_exception(e)
        except ContainerRuntimeError as e:
            logger.error(f"{request.method} runtime error: {e}")
            envelope = self._normalizer.internal_error(f"{request.method} runtime error: {e}")
        except Exception as e:
            logger.exception(f"{request.method} failed: {e}")
            envelope = self._normalizer.internal_error(f"{request.method} failed: {e}")

        return envelope.model_copy(update={"id": request.id})

    async def call_llm(self, params: Params) -> Envelope:
        """Turn an instruction into plan JSON text."""
        if self.llm is None:
            raise PlanExecutionError("CallLLM is not available: no LLM client configured")

        instruction = _param(params, "instruction")
        if not isinstance(instruction, str) or not instruction.strip():
            raise InvalidParametersError("CallLLM requires a non-empty instruction")

        logger.info(f"[CallLLM] Received user input: {instruction}")
        plan_json = await self.llm.generate_plan(instruction, self.registry.list_tools())
        return self._normalizer.result(plan_json)

    async def execute_plan(self, params: Params) -> Envelope:
        return await self.executor.execute_plan(_param(params, "plan"))

    async def call_tool(self, params: Params) -> Envelope:
        raw = params if isinstance(params, dict) else _param(params, "tool_call")
        if not isinstance(raw, dict):
            raise InvalidParametersError("CallTool requires {tool_name, parameters}")
        try:
            args = ToolCallArgs(**raw)
        except ValidationError as e:
            raise InvalidParametersError(f"invalid tool call arguments: {e.errors()[0]['msg']}") from e

        return await self.executor.call_tool(args.tool_name, args.parameters)

    async def list_tools(self, params: Params = None) -> Envelope:
        tools = [
            ToolInfo(name=t.name, description=t.description, input_schema=t.input_schema).model_dump()
            for t in self.registry.list_tools()
        ]
        return self._normalizer.result(tools)

    async def list_prompts(self, params: Params = None) -> Envelope:
        prompts = self.prompts.list_prompts() if self.prompts else []
        return self._normalizer.result(prompts)

    async def get_prompt(self, params: Params) -> Envelope:
        if self.prompts is None:
            raise InvalidParametersError("no prompts available")

        name = _param(params, "name", 0)
        arguments = _param(params, "arguments", 1) or {}
        if not isinstance(name, str) or not name:
            raise InvalidParametersError("GetPrompt requires a prompt name")
        if not isinstance(arguments, dict) or not all(isinstance(v, str) for v in arguments.values()):
            raise InvalidParametersError("GetPrompt arguments must map names to strings")

        result = await self.prompts.get_prompt(name, arguments, self.runtime)
        return self._normalizer.result(result.model_dump())


async def create_server(
    settings: Optional[Settings] = None,
    runtime: Optional[ContainerRuntime] = None,
    llm: Optional[LLMClient] = None,
) -> Server:
    """
    Build the server: runtime, frozen registry, executor, LLM and prompts.

    Raises on unrecoverable startup conditions (Docker client, API key).
    """
    settings = settings or get_settings()
    llm = llm or get_llm_client()

    if runtime is None:
        runtime = create_runtime(settings.docker_base_url)
        await runtime.initialize()

    registry = build_default_registry(pull_timeout_seconds=settings.pull_timeout_seconds)
    executor = PlanExecutor(registry, runtime, timeout_seconds=settings.plan_timeout_seconds)

    prompts = PromptRegistry(settings.prompts_path)
    await prompts.load()

    server = Server(
        registry=registry,
        runtime=runtime,
        executor=executor,
        llm=llm,
        prompts=prompts,
    )
    logger.info(f"Server ready with {registry.tool_count} tools: {', '.join(server.method_names)}")
    return server


# Singleton instance
_server: Optional[Server] = None


async def get_server() -> Server:
    """Get or create the server singleton."""
    global _server
    if _server is None:
        _server = await create_server()
    return _server


async def shutdown_server() -> None:
    global _server
    if _server is not None:
        await _server.runtime.shutdown()
        _server = None
