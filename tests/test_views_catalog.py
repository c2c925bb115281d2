import pytest
from decimal import Decimal

from apps.catalog.models import JobType


@pytest.mark.django_db
def test_job_name_is_unique_per_part_type_ignoring_case(admin_client, job_types):
    r = admin_client.post("/api/catalog/job-types/", {"part_type": "rod", "job_name": " assembly ", "rate": "3"}, format="json")
    assert r.status_code == 409

    r = admin_client.post("/api/catalog/job-types/", {"part_type": "pin", "job_name": "ASSEMBLY", "rate": "3"}, format="json")
    assert r.status_code == 201, r.content


@pytest.mark.django_db
def test_negative_rate_is_rejected(admin_client):
    r = admin_client.post("/api/catalog/job-types/", {"part_type": "sleeve", "job_name": "CASTING", "rate": "-1"}, format="json")
    assert r.status_code == 400


@pytest.mark.django_db
def test_rate_history_entry(admin_client, job_types):
    job = job_types["assembly"]
    r = admin_client.post(f"/api/catalog/job-types/{job.id}/rates/", {
        "rate": "2.75", "effective_from_year": 2024, "effective_from_month": 4,
    }, format="json")
    assert r.status_code == 201, r.content
    job.refresh_from_db()
    assert job.rate == Decimal("2.75")


@pytest.mark.django_db
def test_workers_read_catalog_only(worker_client, job_types):
    assert worker_client.get("/api/catalog/job-types/?part_type=rod").status_code == 200
    r = worker_client.post("/api/catalog/job-types/", {"part_type": "pin", "job_name": "X", "rate": "1"}, format="json")
    assert r.status_code == 403
    assert not JobType.objects.filter(job_name="X").exists()


@pytest.mark.django_db
def test_product_sizes(admin_client):
    r = admin_client.post("/api/catalog/products/", {"part_type": "sleeve", "identifier": "SL-101", "sizes": ["STD", "0.25"]}, format="json")
    assert r.status_code == 201, r.content
    assert r.json()["code"] == "SL-101"
    r = admin_client.post("/api/catalog/products/", {"part_type": "rod", "identifier": "R-1", "sizes": ["STD", "STD"]}, format="json")
    assert r.status_code == 400
