import re
import json
import logging
from typing import Optional, Dict, Any, List, Union

from .types import Action
from .errors import MalformedPlanError, EmptyPlanError, InvalidActionError

logger = logging.getLogger(__name__)


class PlanParser:
    """Parses plan JSON into ordered action entries."""

    @staticmethod
    def extract_json_block(text: str) -> Optional[str]:
        """Extract JSON from text, handling markdown fences."""
        fence_match = re.search(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL)
        if fence_match:
            return fence_match.group(1)

        stripped = text.strip()
        return stripped or None

    @staticmethod
    def parse(plan: Union[str, List[Any], None]) -> List[Dict[str, Any]]:
        """
        Decode a plan into its ordered entries.

        Entry names are not checked here; the executor validates each
        entry when it reaches it so earlier actions still run.

        Raises:
            EmptyPlanError: Plan is blank or has no actions
            MalformedPlanError: Plan is not a JSON array of objects
        """
        if plan is None:
            raise EmptyPlanError("ExecutePlan received empty plan")

        if isinstance(plan, str):
            if not plan.strip():
                raise EmptyPlanError("ExecutePlan received empty plan")
            try:
                data = json.loads(plan)
            except json.JSONDecodeError as e:
                logger.warning(f"Error unmarshalling plan JSON: {e}")
                raise MalformedPlanError(f"failed to parse plan JSON: {e}") from e
        else:
            data = plan

        if not isinstance(data, list):
            raise MalformedPlanError(
                f"failed to parse plan JSON: expected an array of actions, got {type(data).__name__}"
            )

        for index, entry in enumerate(data, start=1):
            if not isinstance(entry, dict):
                raise MalformedPlanError(
                    f"failed to parse plan JSON: action {index} is not an object"
                )

        if not data:
            raise EmptyPlanError("received empty plan")

        return data

    @staticmethod
    def to_action(entry: Dict[str, Any]) -> Action:
        """
        Build an Action from one plan entry.

        ``parameters`` that are absent or not an object become an empty bag;
        unrecognized keys are ignored.

        Raises:
            InvalidActionError: Entry has no usable ``action`` name
        """
        name = entry.get("action")
        if not isinstance(name, str) or not name:
            raise InvalidActionError("invalid action format")

        parameters = entry.get("parameters")
        if not isinstance(parameters, dict):
            if parameters is not None:
                logger.warning(f"Ignoring non-object parameters for action {name}")
            parameters = {}

        return Action(name=name, parameters=parameters)
