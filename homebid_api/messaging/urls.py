from django.urls import path
from . import views

urlpatterns = [
    path('messages', views.CreateMessageAPIView.as_view(), name='message-create'),
    path('messages/<int:id>/read', views.MarkMessageReadAPIView.as_view(), name='message-read'),
    path('projects/<int:project_id>/messages', views.ListProjectMessagesAPIView.as_view(), name='project-messages'),
    path('users/<int:user_id>/messages/<int:other_user_id>', views.ListConversationAPIView.as_view(), name='conversation'),
]
