from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    use_in_migrations = True

    def get_by_natural_key(self, username):
        # Emails are stored lowercased by onboarding; sign-in matches any case.
        return self.get(**{f"{self.model.USERNAME_FIELD}__iexact": username})

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ROLE_ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    ROLE_ADMIN = "admin"
    ROLE_AGENT = "agent"
    ROLE_ACCOUNTANT = "accountant"
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_AGENT, "Sales agent"),
        (ROLE_ACCOUNTANT, "Accountant"),
    ]

    ACCESS_CHOICES = [
        ("view", "View only"),
        ("edit", "View, add and edit"),
        ("full", "Full access"),
        ("custom", "Custom"),
    ]

    username = None
    first_name = None
    last_name = None

    name = models.CharField("Name", max_length=100)
    email = models.EmailField("Email", unique=True)
    role = models.CharField("Role", max_length=20, choices=ROLE_CHOICES, default=ROLE_AGENT)
    access_level = models.CharField("Access level", max_length=10, choices=ACCESS_CHOICES, blank=True, null=True)
    permissions = models.JSONField("Permissions", default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        ordering = ["name"]
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.name} ({self.get_role_display()})"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name


class SalesAgent(models.Model):
    TYPE_CHOICES = [
        ("B2B", "B2B"),
        ("B2C", "B2C"),
        ("Both", "Both"),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="agent_profile")
    agent_type = models.CharField("Agent type", max_length=4, choices=TYPE_CHOICES, default="Both")
    commission_rate = models.DecimalField("Commission (%)", max_digits=5, decimal_places=2, default=0)
    is_active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["user__name"]
        verbose_name = "Sales agent"
        verbose_name_plural = "Sales agents"

    def __str__(self):
        return f"{self.user.name} ({self.agent_type})"
