from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    projectId = serializers.IntegerField(source='project_id', read_only=True)
    senderId = serializers.IntegerField(source='sender_id', read_only=True)
    receiverId = serializers.IntegerField(source='receiver_id', read_only=True)
    isRead = serializers.BooleanField(source='is_read', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Message
        fields = ['id', 'projectId', 'senderId', 'receiverId', 'content', 'isRead', 'createdAt']
        read_only_fields = fields


class MessageWithUsersSerializer(MessageSerializer):
    sender = UserSummarySerializer(read_only=True)
    receiver = UserSummarySerializer(read_only=True)

    class Meta(MessageSerializer.Meta):
        fields = MessageSerializer.Meta.fields + ['sender', 'receiver']
        read_only_fields = fields


class CreateMessageSerializer(serializers.Serializer):
    """The sender is always the authenticated user; a senderId, if sent, must match it."""
    projectId = serializers.IntegerField(min_value=1)
    senderId = serializers.IntegerField(required=False)
    receiverId = serializers.IntegerField(min_value=1)
    # Blank and over-long content is rejected by MessageService.
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)

    def validate_senderId(self, value):
        if value != self.context['request'].user.id:
            raise serializers.ValidationError("You can only send messages as yourself.")
        return value

    def validate_receiverId(self, value):
        if value == self.context['request'].user.id:
            raise serializers.ValidationError("Cannot send a message to yourself.")
        return value
