import uuid

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    """Custom manager for the User model that uses email as the unique identifier."""

    def create_user(self, email, password=None, roles=(), **extra_fields):
        if not email:
            raise ValueError("An email address is required.")
        email = self.normalize_email(email)
        extra_fields.setdefault("is_active", True)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        if roles:
            user.set_roles(roles)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, roles=[Role.ADMIN], **extra_fields)


class Role(models.Model):
    """Named role granted to users. Route policies match on ``name``."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    COORDINATOR = "COORDINATOR"

    DEFAULT_ROLES = {
        ADMIN: "Full access, including firm administration",
        MANAGER: "Manages campaigns, influencers and financial records",
        COORDINATOR: "Day-to-day campaign coordination, read access",
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField("name", max_length=50, unique=True)
    description = models.CharField("description", max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Role"
        verbose_name_plural = "Roles"

    def __str__(self):
        return self.name


class User(AbstractBaseUser, PermissionsMixin):
    """
    Dashboard user.

    Uses email as the unique identifier. A user belongs to at most one firm
    and holds any number of roles; both are copied into the access token so
    the API can authorise a request without a database round trip.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )
    email = models.EmailField(
        "email address",
        unique=True,
        error_messages={
            "unique": "Email address is already registered",
        },
    )
    name = models.CharField("name", max_length=150, blank=True, default="")
    firm = models.ForeignKey(
        "stores.Firm",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
        verbose_name="firm",
    )
    roles = models.ManyToManyField(Role, blank=True, related_name="users", verbose_name="roles")
    is_active = models.BooleanField("active", default=True, db_index=True)
    is_staff = models.BooleanField("staff status", default=False)
    date_joined = models.DateTimeField("date joined", default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["email"]

    def __str__(self):
        return self.name or self.email

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles.all())

    def has_role(self, *names) -> bool:
        return bool(set(names) & set(self.role_names))

    def set_roles(self, names):
        roles = [Role.objects.get_or_create(name=name)[0] for name in names]
        self.roles.set(roles)
