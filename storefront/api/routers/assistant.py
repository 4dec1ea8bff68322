# storefront/api/routers/assistant.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ChatRequest, ChatResponse
from storefront.services.assistant_service import AssistantService
from storefront.services.intent_resolvers import IntentResolver, build_intent_resolver
from storefront.utils.errors import AssistantUnavailableError, ServiceError

router = APIRouter(prefix="/ai", tags=["ai"])


def get_intent_resolver() -> IntentResolver:
    try:
        return build_intent_resolver()
    except AssistantUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/chat/{user_id}", response_model=ChatResponse)
def chat(
    user_id: str,
    payload: ChatRequest,
    db: Session = Depends(get_db),
    resolver: IntentResolver = Depends(get_intent_resolver),
):
    svc = AssistantService(db, resolver)
    try:
        return svc.chat(user_id, payload)
    except AssistantUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ServiceError as e:
        raise HTTPException(status_code=500, detail=str(e))
