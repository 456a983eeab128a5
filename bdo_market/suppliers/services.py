# suppliers/services.py
import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from common.exceptions import InvalidTransition
from .models import SupplierProfile

logger = logging.getLogger(__name__)

# APPROVED and REJECTED are terminal.
ALLOWED_TRANSITIONS = {
    SupplierProfile.Status.PENDING: {SupplierProfile.Status.APPROVED, SupplierProfile.Status.REJECTED},
    SupplierProfile.Status.APPROVED: set(),
    SupplierProfile.Status.REJECTED: set(),
}


def _transition(profile_id, new_status, **changes):
    with transaction.atomic():
        profile = get_object_or_404(SupplierProfile.objects.select_for_update(), pk=profile_id)
        if new_status not in ALLOWED_TRANSITIONS[profile.status]:
            raise InvalidTransition(
                f"Cannot move supplier from {profile.status} to {new_status}."
            )
        profile.status = new_status
        for field, value in changes.items():
            setattr(profile, field, value)
        profile.save(update_fields=["status", "updated_at", *changes])
    return profile


def approve_supplier(admin, profile_id):
    profile = _transition(profile_id, SupplierProfile.Status.APPROVED, approved_at=timezone.now())
    logger.info("Supplier %s approved by %s", profile.pk, admin.pk)
    return profile


def reject_supplier(admin, profile_id, reason):
    profile = _transition(profile_id, SupplierProfile.Status.REJECTED, rejection_reason=reason)
    logger.info("Supplier %s rejected by %s: %s", profile.pk, admin.pk, reason)
    return profile
