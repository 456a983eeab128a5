# suppliers/models.py
import uuid

from django.conf import settings
from django.db import models


class SupplierProfile(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="supplier_profile"
    )
    business_name = models.CharField(max_length=200)
    business_name_ar = models.CharField(max_length=200)
    iban = models.CharField(max_length=34, blank=True)
    tax_number = models.CharField(max_length=50, blank=True)
    is_tax_registered = models.BooleanField(default=False)
    description = models.TextField(blank=True)
    description_ar = models.TextField(blank=True)
    logo_url = models.URLField(blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    rejection_reason = models.TextField(blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.business_name

    @property
    def is_approved(self):
        return self.status == self.Status.APPROVED
