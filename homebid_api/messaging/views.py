from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status, views
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema

from homebid_api.exceptions import NotFoundError
from projects.models import Project
from .models import Message
from .serializers import CreateMessageSerializer, MessageSerializer, MessageWithUsersSerializer
from .services import MessageService


class CreateMessageAPIView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Send a message about a project",
        request_body=CreateMessageSerializer,
        responses={200: MessageSerializer, 400: "Validation error"}
    )
    def post(self, request):
        serializer = CreateMessageSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        message = MessageService().post_message(
            project_id=data['projectId'],
            sender_id=request.user.id,
            receiver_id=data['receiverId'],
            content=data['content'],
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_200_OK)


class MarkMessageReadAPIView(views.APIView):
    """Only the receiver can mark a message as read."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Mark a message as read",
        responses={200: MessageSerializer, 403: "Forbidden", 404: "Not found"}
    )
    def put(self, request, id):
        message = Message.objects.filter(id=id).first()
        if message is None:
            raise NotFoundError("Message not found.")
        if message.receiver_id != request.user.id:
            raise PermissionDenied("Only the receiver can mark this message as read.")

        message = MessageService().mark_read(message_id=message.id)
        return Response(MessageSerializer(message).data, status=status.HTTP_200_OK)


class ListProjectMessagesAPIView(generics.ListAPIView):
    """
    The project's homeowner (and staff) see every message on the project.
    Other users see only the messages they sent or received there, and get
    403 if they have none.
    """
    serializer_class = MessageWithUsersSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = []

    @swagger_auto_schema(
        operation_summary="List messages on a project",
        responses={200: MessageWithUsersSerializer(many=True), 403: "Forbidden", 404: "Not found"}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        project = get_object_or_404(Project, id=self.kwargs['project_id'])
        messages = MessageService().list_messages(project_id=project.id)

        user = self.request.user
        if user.is_staff or project.homeowner_id == user.id:
            return messages

        own = messages.filter(Q(sender_id=user.id) | Q(receiver_id=user.id))
        if not own.exists():
            raise PermissionDenied("Not authorised to view messages on this project.")
        return own


class ListConversationAPIView(generics.ListAPIView):
    serializer_class = MessageWithUsersSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = []

    def get(self, request, *args, **kwargs):
        participants = (self.kwargs['user_id'], self.kwargs['other_user_id'])
        if request.user.id not in participants and not request.user.is_staff:
            raise PermissionDenied("Not authorised to view this conversation.")
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        return MessageService().list_conversation(
            user_a_id=self.kwargs['user_id'],
            user_b_id=self.kwargs['other_user_id'],
        )
