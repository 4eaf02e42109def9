"""
Message Routes - API endpoints for messaging between trainers and clients.
"""
from fastapi import APIRouter, Depends
from auth import get_current_user
from models import SendMessageRequest
from models_orm import UserORM
from service_modules.message_service import MessageService, get_message_service
from sockets import manager

router = APIRouter(tags=["Messages"])


@router.get("/api/messages")
async def get_conversations(
    user: UserORM = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Get all conversations for the current user."""
    return service.get_conversations(user)


@router.get("/api/messages/unread-count")
async def get_unread_count(
    user: UserORM = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    return {"count": service.get_unread_count(user.id)}


@router.get("/api/messages/{user_id}")
async def get_thread(
    user_id: str,
    user: UserORM = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Messages with another user, oldest first. Marks received ones read."""
    return service.get_thread(user.id, user_id)


@router.post("/api/messages", status_code=201)
async def send_message(
    request: SendMessageRequest,
    user: UserORM = Depends(get_current_user),
    service: MessageService = Depends(get_message_service)
):
    """Send a message to another user."""
    result = service.send_message(user.id, request.receiver_id, request.content)

    # Send real-time notification to receiver via WebSocket
    await manager.send_to_user(request.receiver_id, {
        "type": "new_message",
        "message": result,
        "sender_name": user.name
    })
    return result
