"""
Holds the User model and UserManager class.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """
    Account factory for forum members. A member signs in with the username;
    the email is required and unique so one address maps to one account.
    """

    def create_user(self, username, email, password, **extra_fields):
        """
        Store a member with a normalized email and a hashed password. The
        password is not run through the password validators here; signup does
        that before calling in.
        """
        if not email:
            raise ValueError(_("The Email must be set"))
        user = self.model(
            username=username, email=self.normalize_email(email), **extra_fields
        )
        user.set_password(password)
        user.save()
        return user

    def create_superuser(self, username, email, password, **extra_fields):
        """Admin account used by ``createsuperuser`` to moderate the forum."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        for flag in ("is_staff", "is_superuser"):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")
        return self.create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Forum member. Posts, comments and likes are owned by a user and removed
    with it.
    """

    email = models.EmailField(_("email address"), unique=True)
    bio = models.TextField(null=True, blank=True)

    objects = UserManager()

    REQUIRED_FIELDS = ["email"]

    class Meta:
        db_table = "user"

    def __str__(self):
        return self.username
