# accounts/models.py

from django.db import models
from django.contrib.auth.models import (
    AbstractBaseUser,
    PermissionsMixin,
    BaseUserManager,
)

# ----------------------------------
# CUSTOM USER MANAGER
# ----------------------------------
# Email-based user creation; superusers are always admins.
class UserManager(BaseUserManager):

    def create_user(self, email, password=None, **extra_fields):
        # Email is the primary identifier; it must be provided
        if not email:
            raise ValueError("Email is required")

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email, password, **extra_fields)


# ----------------------------------
# CUSTOM USER MODEL
# ----------------------------------
# Customers book fields; admins verify payments and manage bookings.
class User(AbstractBaseUser, PermissionsMixin):

    CUSTOMER = "customer"
    ADMIN = "admin"

    ROLE_CHOICES = (
        (CUSTOMER, "Customer"),
        (ADMIN, "Admin"),
    )

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255)

    # Not unique: households share numbers
    phone_number = models.CharField(max_length=20, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=CUSTOMER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["full_name"]

    def save(self, *args, **kwargs):
        # Admin role is what grants payment verification (is_staff)
        if self.role == self.ADMIN:
            self.is_staff = True
        super().save(*args, **kwargs)

    def __str__(self):
        return self.email
