"""
Message Service - direct messages between a trainer and their clients.
"""
from typing import List

from sqlalchemy import or_, and_

from .base import (
    HTTPException, uuid, logging,
    get_db_session, UserORM, ClientORM, MessageORM,
    to_dict, now_iso
)

logger = logging.getLogger("trainr")


def _between(a: str, b: str):
    return or_(
        and_(MessageORM.sender_id == a, MessageORM.receiver_id == b),
        and_(MessageORM.sender_id == b, MessageORM.receiver_id == a)
    )


class MessageService:
    """Service for conversations and messages."""

    def get_conversations(self, user: UserORM) -> List[dict]:
        """
        Trainers see one conversation per client, clients see their trainer.
        Each carries the last message and how many are unread.
        """
        db = get_db_session()
        try:
            if user.role == "trainer":
                partners = db.query(UserORM).join(
                    ClientORM, ClientORM.user_id == UserORM.id
                ).filter(ClientORM.trainer_id == user.id).order_by(UserORM.name).all()
            else:
                client = db.query(ClientORM).filter(ClientORM.user_id == user.id).first()
                partners = []
                if client and client.trainer_id:
                    partners = db.query(UserORM).filter(UserORM.id == client.trainer_id).all()

            conversations = []
            for partner in partners:
                last = db.query(MessageORM).filter(
                    _between(user.id, partner.id)
                ).order_by(MessageORM.timestamp.desc()).first()
                unread = db.query(MessageORM).filter(
                    MessageORM.sender_id == partner.id,
                    MessageORM.receiver_id == user.id,
                    MessageORM.read_status == False
                ).count()
                conversations.append({
                    "id": partner.id,
                    "name": partner.name,
                    "profile_image": partner.profile_image,
                    "last_message": last.content if last else None,
                    "last_message_at": last.timestamp if last else None,
                    "unread_count": unread,
                })
            return conversations
        finally:
            db.close()

    def get_thread(self, user_id: str, other_user_id: str) -> List[dict]:
        """Messages between two users, oldest first. Received ones become read."""
        db = get_db_session()
        try:
            messages = db.query(MessageORM).filter(
                _between(user_id, other_user_id)
            ).order_by(MessageORM.timestamp.asc()).all()
            result = [to_dict(m) for m in messages]

            db.query(MessageORM).filter(
                MessageORM.sender_id == other_user_id,
                MessageORM.receiver_id == user_id,
                MessageORM.read_status == False
            ).update({"read_status": True}, synchronize_session=False)
            db.commit()
            return result
        finally:
            db.close()

    def send_message(self, sender_id: str, receiver_id: str, content: str) -> dict:
        if not receiver_id or not content:
            raise HTTPException(status_code=400, detail="Receiver ID and content are required")

        db = get_db_session()
        try:
            if not db.query(UserORM).filter(UserORM.id == receiver_id).first():
                raise HTTPException(status_code=404, detail="Receiver not found")

            message = MessageORM(
                id=str(uuid.uuid4()),
                sender_id=sender_id,
                receiver_id=receiver_id,
                content=content,
                timestamp=now_iso(),
                read_status=False
            )
            db.add(message)
            db.commit()
            db.refresh(message)
            return to_dict(message)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error sending message from {sender_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to send message: {str(e)}")
        finally:
            db.close()

    def get_unread_count(self, user_id: str) -> int:
        db = get_db_session()
        try:
            return db.query(MessageORM).filter(
                MessageORM.receiver_id == user_id,
                MessageORM.read_status == False
            ).count()
        finally:
            db.close()


# Singleton instance
message_service = MessageService()

def get_message_service() -> MessageService:
    """Dependency injection helper."""
    return message_service
