"""Result Normalizer - Unified response formatting.

Converts execution outcomes into the JSON-RPC envelope returned to
every caller, whatever the operation.
"""

import logging
from typing import Any, Optional, Union

from .types import Envelope, EnvelopeError, ErrorCode, ExecutionStatus
from .errors import PlanExecutionError

logger = logging.getLogger(__name__)


class ResultNormalizer:
    """
    Build success and error envelopes.

    Output Format:
    - jsonrpc: "2.0"
    - result: payload on success, null on failure
    - error: {code, message} on failure, null on success
    - id: request id, filled in by the transport
    """

    def success(self, message: str) -> Envelope:
        """Envelope with the fixed confirmation payload."""
        return Envelope(result={
            "status": ExecutionStatus.SUCCESS.value,
            "message": message,
        })

    def result(self, payload: Any, request_id: Optional[Union[int, str]] = None) -> Envelope:
        """Envelope carrying an arbitrary result payload."""
        return Envelope(result=payload, id=request_id)

    def error(
        self,
        code: int,
        message: str,
        request_id: Optional[Union[int, str]] = None,
    ) -> Envelope:
        """Envelope carrying an error object."""
        return Envelope(error=EnvelopeError(code=int(code), message=message), id=request_id)

    def from_exception(self, exc: PlanExecutionError) -> Envelope:
        """Convert a taxonomy exception into an error envelope."""
        return self.error(exc.code, exc.message)

    def internal_error(self, message: str) -> Envelope:
        return self.error(ErrorCode.EXECUTION_FAILED, message)
