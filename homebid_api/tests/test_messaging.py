import pytest
from django.urls import reverse

from homebid_api.exceptions import NotFoundError, ValidationError
from messaging.models import Message
from messaging.services import MessageService


pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('content', ['', '   ', '\n\t'])
def test_blank_message_rejected(project, homeowner, contractor_user, content):
    with pytest.raises(ValidationError):
        MessageService().post_message(
            project_id=project.id,
            sender_id=homeowner.id,
            receiver_id=contractor_user.id,
            content=content,
        )
    assert not Message.objects.exists()


def test_message_too_long(project, homeowner, contractor_user, settings):
    settings.MESSAGE_MAX_LENGTH = 10

    with pytest.raises(ValidationError):
        MessageService().post_message(
            project_id=project.id,
            sender_id=homeowner.id,
            receiver_id=contractor_user.id,
            content='x' * 11,
        )


def test_post_message_trims_and_stores_unread(project, homeowner, contractor_user):
    message = MessageService().post_message(
        project_id=project.id,
        sender_id=homeowner.id,
        receiver_id=contractor_user.id,
        content='  When can you start?  ',
    )

    assert message.content == 'When can you start?'
    assert message.is_read is False


def test_post_message_unknown_receiver(project, homeowner):
    with pytest.raises(ValidationError):
        MessageService().post_message(project_id=project.id, sender_id=homeowner.id, receiver_id=9999, content='hi')


def test_mark_read_is_idempotent(project, homeowner, contractor_user):
    service = MessageService()
    message = service.post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='hello',
    )

    assert service.mark_read(message_id=message.id).is_read is True
    assert service.mark_read(message_id=message.id).is_read is True


def test_mark_read_missing():
    with pytest.raises(NotFoundError):
        MessageService().mark_read(message_id=1)


def test_list_messages_in_insertion_order(project, homeowner, contractor_user):
    service = MessageService()
    first = service.post_message(project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='one')
    second = service.post_message(project_id=project.id, sender_id=contractor_user.id, receiver_id=homeowner.id, content='two')
    third = service.post_message(project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='three')

    assert [m.id for m in service.list_messages(project_id=project.id)] == [first.id, second.id, third.id]
    assert [m.id for m in service.list_conversation(user_a_id=contractor_user.id, user_b_id=homeowner.id)] == [
        first.id, second.id, third.id,
    ]


def test_post_message_api(api_client, project, homeowner, contractor_user):
    api_client.force_authenticate(homeowner)

    response = api_client.post(
        reverse('message-create'),
        {'projectId': project.id, 'senderId': homeowner.id, 'receiverId': contractor_user.id, 'content': 'Can you visit Friday?'},
        format='json',
    )

    assert response.status_code == 200
    assert response.data['senderId'] == homeowner.id
    assert response.data['isRead'] is False


def test_post_blank_message_api(api_client, project, homeowner, contractor_user):
    api_client.force_authenticate(homeowner)

    response = api_client.post(
        reverse('message-create'),
        {'projectId': project.id, 'receiverId': contractor_user.id, 'content': '  '},
        format='json',
    )

    assert response.status_code == 400
    assert response.data['code'] == 'validation_error'
    assert not Message.objects.exists()


def test_project_messages_api_includes_users(api_client, project, homeowner, contractor_user):
    MessageService().post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='hello',
    )
    api_client.force_authenticate(contractor_user)

    response = api_client.get(reverse('project-messages', kwargs={'project_id': project.id}))

    assert response.status_code == 200
    assert response.data[0]['sender']['email'] == homeowner.email
    assert response.data[0]['receiver']['email'] == contractor_user.email


def test_only_receiver_marks_read(api_client, project, homeowner, contractor_user):
    message = MessageService().post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='hello',
    )
    api_client.force_authenticate(homeowner)
    assert api_client.put(reverse('message-read', kwargs={'id': message.id})).status_code == 403

    api_client.force_authenticate(contractor_user)
    response = api_client.put(reverse('message-read', kwargs={'id': message.id}))
    assert response.status_code == 200
    assert response.data['isRead'] is True


def test_conversation_hidden_from_outsiders(api_client, homeowner, contractor_user, other_contractor):
    api_client.force_authenticate(other_contractor.user)

    response = api_client.get(reverse('conversation', kwargs={'user_id': homeowner.id, 'other_user_id': contractor_user.id}))

    assert response.status_code == 403


def test_project_messages_hidden_from_outsiders(api_client, project, homeowner, contractor_user, other_contractor):
    MessageService().post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='private quote',
    )
    api_client.force_authenticate(other_contractor.user)

    response = api_client.get(reverse('project-messages', kwargs={'project_id': project.id}))

    assert response.status_code == 403


def test_project_messages_participant_sees_own_thread(api_client, project, homeowner, contractor_user, other_contractor):
    service = MessageService()
    mine = service.post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=contractor_user.id, content='your quote',
    )
    service.post_message(
        project_id=project.id, sender_id=homeowner.id, receiver_id=other_contractor.user_id, content='their quote',
    )
    api_client.force_authenticate(contractor_user)

    response = api_client.get(reverse('project-messages', kwargs={'project_id': project.id}))

    assert response.status_code == 200
    assert [m['id'] for m in response.data] == [mine.id]

    api_client.force_authenticate(homeowner)
    assert len(api_client.get(reverse('project-messages', kwargs={'project_id': project.id})).data) == 2
