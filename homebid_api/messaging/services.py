from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q
import logging

from homebid_api.exceptions import NotFoundError, ValidationError
from projects.models import Project
from .models import Message

logger = logging.getLogger(__name__)

User = get_user_model()


class MessageService:
    """Project-scoped messages between two users. Clients poll the list endpoints."""

    def post_message(self, *, project_id, sender_id, receiver_id, content):
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty.")
        max_length = getattr(settings, 'MESSAGE_MAX_LENGTH', 5000)
        if len(content) > max_length:
            raise ValidationError(f"Message content cannot exceed {max_length} characters.")

        if not Project.objects.filter(id=project_id).exists():
            raise ValidationError("Project does not exist.")
        found = User.objects.filter(id__in=[sender_id, receiver_id]).count()
        if found != len({sender_id, receiver_id}):
            raise ValidationError("Sender or receiver does not exist.")

        message = Message.objects.create(
            project_id=project_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            is_read=False,
        )
        logger.info(
            "Message posted",
            extra={'message_id': message.id, 'project_id': project_id, 'sender_id': sender_id},
        )
        return message

    def mark_read(self, *, message_id):
        message = Message.objects.filter(id=message_id).first()
        if message is None:
            raise NotFoundError("Message not found.")
        if not message.is_read:
            message.is_read = True
            message.save(update_fields=['is_read'])
        return message

    def list_messages(self, *, project_id):
        return Message.objects.filter(project_id=project_id).select_related('sender', 'receiver')

    def list_conversation(self, *, user_a_id, user_b_id):
        return Message.objects.filter(
            Q(sender_id=user_a_id, receiver_id=user_b_id) | Q(sender_id=user_b_id, receiver_id=user_a_id)
        ).select_related('sender', 'receiver')
