import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import NotFoundError
from fashion_api.core.params import EntityId
from fashion_api.core.security import get_current_user
from fashion_api.database import get_db
from fashion_api.models import ChatSession, User
from fashion_api.models.base import isoformat, utcnow
from fashion_api.schemas import ChatMessageCreate, ChatSessionCreate
from fashion_api.utils.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["Chat"])

# Canned assistant replies until chat is backed by the AI engine
ASSISTANT_REPLIES = {
    "style_advice": "Based on your question about style, I'd recommend...",
    "outfit_help": "For outfit suggestions, consider these combinations...",
    "general": "That's an interesting question! Let me help you with that...",
}


def assistant_reply(session_type: str) -> str:
    return ASSISTANT_REPLIES.get(session_type, ASSISTANT_REPLIES["general"])


def _get_owned_session(db: Session, session_id: str, user_id: str) -> ChatSession:
    session = db.query(ChatSession).filter(
        ChatSession.id == session_id, ChatSession.user_id == user_id
    ).first()
    if not session:
        raise NotFoundError("Chat session", access_denied=True)
    return session


@router.get("/sessions")
async def list_sessions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    query = (
        db.query(ChatSession)
        .filter(ChatSession.user_id == current_user.id)
        .order_by(ChatSession.last_message_at.desc())
    )
    sessions, pagination = paginate(query, page, limit)
    return {
        "success": True,
        "data": {"sessions": [s.to_summary() for s in sessions], "pagination": pagination},
    }


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: ChatSessionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    now = utcnow()
    session = ChatSession(
        user_id=current_user.id,
        session_type=payload.session_type,
        title=payload.title or f"{payload.session_type} session",
        messages=[],
        is_active=True,
        created_at=now,
        last_message_at=now,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return {"success": True, "message": "Chat session created successfully", "data": session.to_dict()}


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    session = _get_owned_session(db, session_id, current_user.id)
    return {"success": True, "data": session.to_dict()}


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    session = _get_owned_session(db, session_id, current_user.id)
    db.delete(session)
    db.commit()
    return {"success": True, "message": "Chat session deleted successfully"}


@router.post("/sessions/{session_id}/messages")
async def send_message(
    session_id: EntityId,
    payload: ChatMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Append the user's message and the assistant's reply to the session."""
    session = _get_owned_session(db, session_id, current_user.id)

    reply = assistant_reply(payload.session_type or session.session_type)
    now = utcnow()
    session.messages = list(session.messages or []) + [
        {"role": "user", "content": payload.content, "timestamp": isoformat(now)},
        {"role": "assistant", "content": reply, "timestamp": isoformat(utcnow())},
    ]
    session.last_message_at = now
    db.commit()

    return {
        "success": True,
        "message": "Message sent successfully",
        "data": {"userMessage": payload.content, "aiResponse": reply, "sessionId": session.id},
    }


@router.get("/sessions/{session_id}/history")
async def get_history(
    session_id: EntityId,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    session = _get_owned_session(db, session_id, current_user.id)
    messages = list(session.messages or [])
    return {"success": True, "data": {"messages": messages, "totalMessages": len(messages)}}
