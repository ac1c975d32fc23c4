"""
Integration tests for the clinic API.

These exercise record CRUD through the entity store, the role gate on
every kind, statistics, navigation and database management.  The tests
use Django REST Framework's APIClient within the APITestCase base class.

To run the tests:

```
pytest -q clinic/tests
```
"""

from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from clinic.models import AuditEvent, Role, User
from clinic.services.runtime import get_store


class ClinicAPITests(APITestCase):
    def setUp(self) -> None:
        """One user per role we need."""
        self.users = {
            role: User.objects.create_user(username=f"{role}1", password="P@ssw0rd1", role=role)
            for role in (Role.ADMIN, Role.DOCTOR, Role.PATIENT, Role.FINANCE, Role.PHARMACIST, Role.RECEPTIONIST)
        }

    def authenticate(self, role) -> APIClient:
        """Return an authenticated APIClient for the user holding ``role``."""
        client = APIClient()
        client.force_authenticate(user=self.users[role])
        return client

    # -----------------------------------------------------------------
    # records
    # -----------------------------------------------------------------
    def test_receptionist_registers_a_patient(self):
        client = self.authenticate(Role.RECEPTIONIST)
        payload = {
            "name": "Emma Wilson",
            "dateOfBirth": "1988-06-15",
            "gender": "Female",
            "contactNumber": "+1 (555) 123-4567",
        }
        response = client.post("/api/patients", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        new_id = response.data["id"]
        self.assertTrue(new_id.startswith("p"))
        self.assertEqual(get_store().patients.get(new_id)["name"], "Emma Wilson")
        self.assertTrue(AuditEvent.objects.filter(action="patients_add", object_id=new_id).exists())

        listed = client.get("/api/patients")
        self.assertEqual(listed.status_code, status.HTTP_200_OK)
        self.assertIn(new_id, [p["id"] for p in listed.data])

    def test_invalid_payload_is_rejected(self):
        client = self.authenticate(Role.RECEPTIONIST)
        response = client.post("/api/patients", {"name": "Emma"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["ok"])
        self.assertIn("dateOfBirth", response.data["error"]["message"])
        self.assertEqual(len(get_store().patients), 3)

    def test_get_update_and_delete(self):
        client = self.authenticate(Role.ADMIN)
        self.assertEqual(client.get("/api/staff/s3").data["name"], "Nancy White")

        response = client.patch("/api/staff/s3", {"department": "Pediatrics", "id": "s99"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], "s3")
        self.assertEqual(response.data["department"], "Pediatrics")

        self.assertEqual(client.delete("/api/staff/s3").status_code, status.HTTP_200_OK)
        self.assertEqual(client.get("/api/staff/s3").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(client.delete("/api/staff/s3").status_code, status.HTTP_404_NOT_FOUND)

    def test_update_unknown_record_is_404(self):
        client = self.authenticate(Role.ADMIN)
        response = client.patch("/api/patients/p404", {"name": "Ghost"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "not_found")

    def test_update_with_a_list_body_is_400(self):
        client = self.authenticate(Role.ADMIN)
        response = client.patch("/api/staff/s3", [{"department": "Pediatrics"}], format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["ok"])
        self.assertEqual(get_store().staff.get("s3")["name"], "Nancy White")

    def test_unknown_kind_is_404(self):
        client = self.authenticate(Role.ADMIN)
        self.assertEqual(client.get("/api/wards").status_code, status.HTTP_404_NOT_FOUND)

    def test_lab_tests_url_alias(self):
        client = self.authenticate(Role.DOCTOR)
        response = client.get("/api/lab-tests")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 3)

    def test_list_filters(self):
        client = self.authenticate(Role.DOCTOR)
        by_patient = client.get("/api/appointments", {"patientId": "p1"})
        self.assertEqual({a["id"] for a in by_patient.data}, {"a1", "a4"})
        by_doctor = client.get("/api/medications", {"doctorId": "d2"})
        self.assertEqual({m["id"] for m in by_doctor.data}, {"m2", "m3"})

    def test_patient_relations(self):
        client = self.authenticate(Role.ADMIN)
        self.assertEqual(len(client.get("/api/patients/p1/appointments").data), 2)
        self.assertEqual(len(client.get("/api/patients/p1/lab-tests").data), 2)
        self.assertEqual([i["id"] for i in client.get("/api/patients/p1/invoices").data], ["i1"])
        self.assertEqual(client.get("/api/patients/p1/visits").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(client.get("/api/patients/p404/appointments").status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(len(client.get("/api/doctors/d1/appointments").data), 3)

    def test_doctor_delete_conflict(self):
        client = self.authenticate(Role.ADMIN)
        response = client.delete("/api/doctors/d1")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["code"], "referential_integrity")
        self.assertIn("appointments", response.data["error"]["dependents"])

    def test_patient_delete_cascades(self):
        client = self.authenticate(Role.ADMIN)
        self.assertEqual(client.delete("/api/patients/p1").status_code, status.HTTP_200_OK)
        self.assertEqual(get_store().patient_appointments("p1"), [])

    # -----------------------------------------------------------------
    # gate
    # -----------------------------------------------------------------
    def test_anonymous_request_needs_authentication(self):
        response = APIClient().get("/api/patients")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "authentication_required")
        self.assertEqual(response.data["redirect"], "/login")
        self.assertEqual(response.data["from"], "/api/patients")

    def test_patient_is_denied_billing(self):
        client = self.authenticate(Role.PATIENT)
        response = client.get("/api/invoices")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "access_denied")
        self.assertEqual(response.data["redirect"], "/")

    def test_pharmacist_scope(self):
        client = self.authenticate(Role.PHARMACIST)
        self.assertEqual(client.get("/api/inventory").status_code, status.HTTP_200_OK)
        self.assertEqual(client.get("/api/medications").status_code, status.HTTP_200_OK)
        self.assertEqual(client.get("/api/patients").status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_reaches_every_kind(self):
        client = self.authenticate(Role.ADMIN)
        for kind in ("patients", "doctors", "appointments", "medications",
                     "lab_tests", "invoices", "inventory", "staff"):
            self.assertEqual(client.get(f"/api/{kind}").status_code, status.HTTP_200_OK, kind)

    def test_access_preview(self):
        client = self.authenticate(Role.PATIENT)
        response = client.get("/api/access/billing")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["outcome"], "deny")
        self.assertEqual(response.data["redirect"], "/")
        self.assertEqual(client.get("/api/access/doctors").data["outcome"], "allow")
        self.assertEqual(client.get("/api/access/wards").status_code, status.HTTP_404_NOT_FOUND)

    def test_navigation(self):
        response = self.authenticate(Role.FINANCE).get("/api/navigation")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        main = [item["title"] for item in response.data["sections"]["main"]]
        self.assertEqual(main, ["Dashboard", "Billing"])
        anonymous = APIClient().get("/api/navigation")
        self.assertEqual(anonymous.data["sections"], {"main": [], "secondary": []})

    # -----------------------------------------------------------------
    # statistics and dashboard
    # -----------------------------------------------------------------
    def test_appointment_stats_follow_updates(self):
        client = self.authenticate(Role.DOCTOR)
        self.assertEqual(client.get("/api/stats/appointments").data["scheduled"], 3)
        client.patch("/api/appointments/a1", {"status": "completed"}, format="json")
        stats = client.get("/api/stats/appointments").data
        self.assertEqual(stats["scheduled"], 2)
        self.assertEqual(stats["completed"], 2)

    def test_inventory_stats(self):
        response = self.authenticate(Role.PHARMACIST).get("/api/stats/inventory")
        self.assertEqual(response.data["value"], 1435.0)
        self.assertEqual(response.data["total"], 4)

    def test_dashboard(self):
        response = self.authenticate(Role.PATIENT).get("/api/dashboard")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["counts"]["patients"], 3)
        self.assertEqual([a["id"] for a in response.data["upcomingAppointments"]], ["a1", "a3", "a2"])
        self.assertEqual(response.data["outstandingBalance"], 350.0)

    # -----------------------------------------------------------------
    # database management
    # -----------------------------------------------------------------
    def test_export_is_admin_only(self):
        self.assertEqual(self.authenticate(Role.DOCTOR).get("/api/admin/database/export").status_code,
                         status.HTTP_403_FORBIDDEN)
        response = self.authenticate(Role.ADMIN).get("/api/admin/database/export")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["collections"]["hospital_patients"]), 3)

    def test_reset(self):
        client = self.authenticate(Role.ADMIN)
        client.delete("/api/staff/s1")
        response = client.post("/api/admin/database/reset", {"kinds": ["staff"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["reset"], ["staff"])
        self.assertIsNotNone(get_store().staff.get("s1"))
        bad = client.post("/api/admin/database/reset", {"kinds": ["wards"]}, format="json")
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

    def test_healthz(self):
        response = self.client.get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["store"]["backend"], "MemoryStorage")
