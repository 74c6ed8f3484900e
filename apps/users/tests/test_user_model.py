import pytest
from django.contrib.auth import get_user_model

from apps.users.models import UserType


@pytest.mark.django_db
def test_create_user_uses_email_as_login():
    User = get_user_model()
    user = User.objects.create_user(
        email="Owner@Example.com",
        password="testpassword123",
        first_name="Olu",
        last_name="Ade",
        user_type=UserType.BUSINESS_OWNER,
    )
    assert user.email == "Owner@example.com"
    assert user.check_password("testpassword123")
    assert user.is_business_owner
    assert not user.is_buyer
    assert user.get_full_name() == "Olu Ade"


@pytest.mark.django_db
def test_create_user_requires_email():
    User = get_user_model()
    with pytest.raises(ValueError):
        User.objects.create_user(email="", password="x")


@pytest.mark.django_db
def test_create_superuser_sets_flags():
    User = get_user_model()
    admin = User.objects.create_superuser(email="admin@example.com", password="x")
    assert admin.is_staff
    assert admin.is_superuser


@pytest.mark.django_db
def test_full_name_falls_back_to_email():
    User = get_user_model()
    user = User.objects.create_user(email="nobody@example.com", password="x")
    assert user.get_full_name() == "nobody@example.com"
    assert user.user_type == UserType.BUYER
