"""Integration tests: space row to stored space certificate."""

import pytest
from src.services.space_certificates import SpaceCertificateService, parse_tier
from src.utils.errors import ConflictError, NotFoundError, ValidationError
from tests.utils.factories import create_space_data
from tests.utils.fakes import InMemoryRecordStore


@pytest.fixture
def space_row():
    return create_space_data()


@pytest.fixture
def space_store(space_row):
    return InMemoryRecordStore({"spaces": [space_row]})


@pytest.fixture
def service(space_store):
    return SpaceCertificateService(space_store)


@pytest.mark.unit
def test_parse_tier():
    assert parse_tier("pro").value == "pro"
    with pytest.raises(ValidationError) as exc_info:
        parse_tier("gold")
    assert exc_info.value.details == {"details": "tier must be 'normal' or 'pro'"}


@pytest.mark.integration
def test_generate_normal_certificate(service, space_store, space_row, freeze_time_fixture):
    result = service.generate(space_row["id"])

    assert result["status"] == "done"
    certificate = result["certificate"]
    assert certificate["meta"]["id"] == result["certificate_id"]
    assert certificate["meta"]["tier"] == "normal"
    assert certificate["property_identity"]["title"] == "T1 in Arroios"
    assert "peer_gravity" not in certificate

    record = space_store.get("certificates", "id", result["certificate_id"])
    assert record["status"] == "done"
    assert record["space_id"] == space_row["id"]
    assert record["property_id"] is None
    assert record["certificate_json"] == certificate
    assert record["source_inputs_json"]["space"]["neighborhood"] == "Arroios"
    assert record["completed_at"].startswith("2026-02-09T12:00:00")


@pytest.mark.integration
def test_generate_pro_certificate(service, space_row):
    certificate = service.generate(space_row["id"], tier="pro")["certificate"]

    assert certificate["meta"]["tier"] == "pro"
    for section in ("silence_and_drift", "peer_gravity", "experience_tension", "strategic_risks", "evidence"):
        assert section in certificate


@pytest.mark.integration
def test_existing_certificate_conflicts_without_force(service, space_store, space_row):
    first = service.generate(space_row["id"])

    with pytest.raises(ConflictError) as exc_info:
        service.generate(space_row["id"])
    assert exc_info.value.details == {
        "existing_certificate_id": first["certificate_id"],
        "message": "Use force=true to regenerate",
    }

    # other tier and forced regeneration are allowed
    service.generate(space_row["id"], tier="pro")
    forced = service.generate(space_row["id"], force=True)
    assert forced["certificate_id"] != first["certificate_id"]
    assert len(space_store.tables["certificates"]) == 3


@pytest.mark.integration
def test_missing_space(service):
    with pytest.raises(NotFoundError, match="Space not found"):
        service.generate("nope")
    with pytest.raises(NotFoundError):
        service.generate("")


@pytest.mark.integration
def test_invalid_tier_checked_before_lookup(service):
    with pytest.raises(ValidationError, match="Invalid tier"):
        service.generate("nope", tier="gold")


@pytest.mark.integration
def test_invalid_space_row():
    store = InMemoryRecordStore({"spaces": [create_space_data(id="bad", area_m2=0, floor="")]})

    with pytest.raises(ValidationError) as exc_info:
        SpaceCertificateService(store).generate("bad")
    assert exc_info.value.details["errors"] == ["floor is required", "area_m2 must be positive"]
    assert "certificates" not in store.tables


@pytest.mark.integration
def test_build_failure_marks_record(space_store, space_row):
    class ExplodingBuilder:
        def build(self, *args, **kwargs):
            raise RuntimeError("template missing")

    with pytest.raises(RuntimeError):
        SpaceCertificateService(space_store, ExplodingBuilder()).generate(space_row["id"])

    record = space_store.first("certificates")
    assert record["status"] == "error"
    assert record["error_message"] == "template missing"


@pytest.mark.integration
def test_get_certificate(service, space_row):
    certificate_id = service.generate(space_row["id"])["certificate_id"]

    assert service.get_certificate(certificate_id)["id"] == certificate_id
    with pytest.raises(NotFoundError, match="Certificate not found"):
        service.get_certificate("missing")
