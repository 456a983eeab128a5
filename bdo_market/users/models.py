# users/models.py
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


def new_auth_id():
    return uuid.uuid4().hex


class CustomUser(AbstractUser):
    class Role(models.TextChoices):
        BUYER = "BUYER", "Buyer"
        SUPPLIER = "SUPPLIER", "Supplier"
        ADMIN = "ADMIN", "Admin"

    # subject the identity provider vouches for; the only thing tokens carry
    auth_id = models.CharField(max_length=64, unique=True, default=new_auth_id, editable=False)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.BUYER)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def display_name(self):
        return self.get_full_name() or self.username


class Address(models.Model):
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name="addresses")
    label = models.CharField(max_length=60, blank=True)
    city = models.CharField(max_length=120)
    district = models.CharField(max_length=120, blank=True)
    street = models.CharField(max_length=255)
    postal_code = models.CharField(max_length=20, blank=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]

    def __str__(self):
        return f"{self.street}, {self.city}"
