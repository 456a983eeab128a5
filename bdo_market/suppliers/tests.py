from django.test import TestCase
from rest_framework.test import APIClient

from common.testing import make_supplier, make_user
from suppliers.models import SupplierProfile


class SupplierApprovalTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.admin = make_user(role="ADMIN")
        self.pending = make_supplier(status=SupplierProfile.Status.PENDING)
        self.c.force_authenticate(self.admin)

    def test_admin_lists_suppliers_by_status(self):
        make_supplier()
        r = self.c.get("/api/admin/suppliers/", {"status": "PENDING"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual([s["id"] for s in r.data], [str(self.pending.pk)])

    def test_approve(self):
        r = self.c.post(f"/api/admin/suppliers/{self.pending.pk}/approve/")
        self.assertEqual(r.status_code, 200, r.data)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, SupplierProfile.Status.APPROVED)
        self.assertIsNotNone(self.pending.approved_at)

    def test_reject_keeps_reason(self):
        r = self.c.post(f"/api/admin/suppliers/{self.pending.pk}/reject/", {"reason": "IBAN mismatch"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, SupplierProfile.Status.REJECTED)
        self.assertEqual(self.pending.rejection_reason, "IBAN mismatch")

    def test_reject_requires_reason(self):
        r = self.c.post(f"/api/admin/suppliers/{self.pending.pk}/reject/", {}, format="json")
        self.assertEqual(r.status_code, 400)

    def test_decisions_are_final(self):
        self.c.post(f"/api/admin/suppliers/{self.pending.pk}/reject/", {"reason": "no"}, format="json")
        r = self.c.post(f"/api/admin/suppliers/{self.pending.pk}/approve/")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "VALIDATION")

        approved = make_supplier()
        r = self.c.post(f"/api/admin/suppliers/{approved.pk}/reject/", {"reason": "late"}, format="json")
        self.assertEqual(r.status_code, 400)
        approved.refresh_from_db()
        self.assertEqual(approved.status, SupplierProfile.Status.APPROVED)

    def test_unknown_supplier(self):
        r = self.c.post("/api/admin/suppliers/00000000-0000-0000-0000-000000000000/approve/")
        self.assertEqual(r.status_code, 404)

    def test_only_admins_decide(self):
        self.c.force_authenticate(self.pending.user)
        r = self.c.post(f"/api/admin/suppliers/{self.pending.pk}/approve/")
        self.assertEqual(r.status_code, 403)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, SupplierProfile.Status.PENDING)


class SupplierProfileTests(TestCase):
    def setUp(self):
        self.c = APIClient()
        self.profile = make_supplier(status=SupplierProfile.Status.PENDING)
        self.c.force_authenticate(self.profile.user)

    def test_supplier_edits_profile_but_not_status(self):
        r = self.c.patch("/api/supplier/profile/", {"description": "Small batch roaster", "status": "APPROVED"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.description, "Small batch roaster")
        self.assertEqual(self.profile.status, SupplierProfile.Status.PENDING)

    def test_supplier_without_profile(self):
        self.c.force_authenticate(make_user(role="SUPPLIER"))
        r = self.c.get("/api/supplier/profile/")
        self.assertEqual(r.status_code, 404)
