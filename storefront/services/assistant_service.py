# storefront/services/assistant_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.domain.schemas import ChatRequest
from storefront.services.assistant_tools import AssistantTools, Operation
from storefront.services.intent_resolvers import IntentResolver
from storefront.utils.errors import AssistantUnavailableError, ServiceError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AssistantService:
    """One chat turn: resolve, run the operations, reply. Nothing is kept between turns."""

    def __init__(self, db: Session, resolver: IntentResolver):
        self.db = db
        self.resolver = resolver

    def _run(self, tools: AssistantTools, operations: List[Operation]) -> List[Dict[str, Any]]:
        return [
            {"function": op.name, "args": dict(op.args or {}), "result": tools.execute(op)}
            for op in operations
        ]

    def chat(self, user_id: str, request: ChatRequest) -> Dict[str, Any]:
        logger.info(f"Assistant turn for user {user_id} via {type(self.resolver).__name__}")
        tools = AssistantTools(self.db, user_id)

        try:
            results = self._run(tools, self.resolver.resolve_intent(request.message))
            results += self._run(tools, self.resolver.follow_up(request.message, results))
            reply = self.resolver.compose_reply(request.message, results)
        except AssistantUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Error in AI assistant: {e}", exc_info=True)
            raise ServiceError("Failed to process AI request") from e

        return {
            "message": reply,
            "function_results": results,
            "timestamp": datetime.now(timezone.utc),
            "model": self.resolver.model,
            "usage": self.resolver.usage,
        }
