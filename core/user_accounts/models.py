"""
User Account Models
Handles user authentication and the directory role of each account.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.core.exceptions import PermissionDenied


class Role(models.TextChoices):
    """
    Directory roles, from most to least privileged.

    admin and hr hold standing access to every field; manager and user see
    internal fields and masked restricted fields; viewer sees public fields
    and masked internal fields only.
    """
    ADMIN = 'admin', 'Administrator'
    HR = 'hr', 'HR Officer'
    MANAGER = 'manager', 'Manager'
    USER = 'user', 'User'
    VIEWER = 'viewer', 'Viewer'


PRIVILEGED_ROLES = (Role.ADMIN, Role.HR)


class CustomUserManager(BaseUserManager):
    """
    Custom user manager for CustomUser model.
    Handles user creation with a directory role.
    """

    def create_user(self, email, name, phone_number, password=None, role=Role.USER, **extra_fields):
        """
        Create and save a user with the given role.

        Args:
            email: User's email address (used for authentication)
            name: User's full name
            phone_number: User's phone number
            password: User's password (will be hashed)
            role: One of Role ('admin', 'hr', 'manager', 'user', 'viewer')
            **extra_fields: Additional fields to set on the user

        Returns:
            CustomUser: The created user instance
        """
        if not email:
            raise ValueError('Email is required')
        if not name:
            raise ValueError('Name is required')
        if not phone_number:
            raise ValueError('Phone number is required')
        if role not in Role.values:
            raise ValueError(f'Unknown role: {role}')

        email = self.normalize_email(email)

        user = self.model(
            email=email,
            name=name,
            phone_number=phone_number,
            role=role,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, phone_number, password=None, **extra_fields):
        """
        Create and save an admin user.
        Required by Django for the createsuperuser management command.
        """
        return self.create_user(
            email=email,
            name=name,
            phone_number=phone_number,
            password=password,
            role=Role.ADMIN,
            **extra_fields
        )


class CustomUser(AbstractBaseUser):
    """Custom user model with email authentication and a directory role"""
    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=15)

    role = models.CharField(
        max_length=16,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        help_text="Directory role; decides which officer fields this account may see"
    )
    is_active = models.BooleanField(default=True)

    # Manager
    objects = CustomUserManager()

    # Django authentication settings
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name', 'phone_number']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return f"{self.name} ({self.email})"

    def is_admin(self):
        """
        Check if user is an administrator.

        Returns:
            bool: True if user has the admin role
        """
        return self.role == Role.ADMIN

    def has_privileged_access(self):
        """
        Check if user holds standing access to restricted officer fields.

        Returns:
            bool: True for admin and hr accounts
        """
        return self.role in PRIVILEGED_ROLES

    # Django admin site hooks
    @property
    def is_staff(self):
        return self.role in PRIVILEGED_ROLES

    def has_perm(self, perm, obj=None):
        return self.is_active and self.role in PRIVILEGED_ROLES

    def has_module_perms(self, app_label):
        return self.is_active and self.role in PRIVILEGED_ROLES

    def delete(self, *args, **kwargs):
        """
        Accounts are referenced by the field access log and never deleted.
        Set is_active through the admin instead.
        """
        raise PermissionDenied(
            "User accounts cannot be deleted. Deactivate the account instead."
        )
