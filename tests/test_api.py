import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.urls import reverse

from containers.models import Container, Item
from containers.services.notifications import CONTAINER_UPDATES_GROUP

pytestmark = pytest.mark.django_db


def run(api_client, operation, **fields):
    return api_client.post(reverse("operation", args=[operation]), fields, format="json")


def make(location, code="C-1", sku="SKU-1", quantity=5, status=Container.Status.STORED):
    return Container.objects.create(code=code, sku=sku, quantity=quantity, status=status, location=location)


# === Операции ===

def test_receive_returns_201_and_creates_container(api_client, seeded_locations):
    response = run(api_client, "receive", container_code="C-1001", sku="SKU-9", quantity="10")

    assert response.status_code == 201
    assert response.json() == {"success": True}
    container = Container.objects.get(code="C-1001")
    assert container.status == "Pending_QC"
    assert container.location == seeded_locations["RECEIVING"]


def test_pda_action_names_and_camel_case_fields(api_client, seeded_locations):
    run(api_client, "receiving", containerCode="C-1", sku="SKU-1", quantity=3)

    response = run(api_client, "qc", containerCode="C-1", decision="fail")

    assert response.status_code == 200
    assert Container.objects.get(code="C-1").status == "QC_Hold"


@pytest.mark.parametrize("operation, fields, status_code, kind", [
    ("receive", {"container_code": "C-1", "sku": "SKU-1", "quantity": "abc"}, 400, "validation"),
    ("inspect", {"container_code": "NOPE", "decision": "pass"}, 404, "not_found"),
    ("receive", {"container_code": "C-1", "sku": "SKU-2", "quantity": "1"}, 409, "conflict"),
    ("teleport", {"container_code": "C-1"}, 400, "validation"),
])
def test_failures_map_to_http_status(api_client, seeded_locations, operation, fields, status_code, kind):
    make(seeded_locations["A-01-01"])

    response = api_client.post(reverse("operation", args=[operation]), fields, format="json")

    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == kind
    assert body["error"]


@pytest.mark.parametrize("quantity", ["9" * 25, str(2 ** 63)])
def test_oversized_quantity_is_400_without_write(api_client, seeded_locations, quantity):
    response = run(api_client, "receive", container_code="C-2", sku="SKU-1", quantity=quantity)

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert not Container.objects.filter(code="C-2").exists()


def test_array_body_is_400(api_client, seeded_locations):
    make(seeded_locations["A-01-01"])

    response = api_client.post(reverse("operation", args=["pick"]), [1, 2], format="json")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Ожидается объект с полями операции",
        "kind": "validation",
    }
    assert Container.objects.get(code="C-1").status == "Stored"


def test_assemble_over_http(api_client, seeded_locations):
    make(seeded_locations["A-01-01"], code="MAT-1")

    response = run(
        api_client, "assembly",
        materialContainer="MAT-1", productContainer="PRD-1", productSku="FG-1", productQty="4",
    )

    assert response.status_code == 201
    assert Container.objects.get(code="MAT-1").status == "Empty"
    assert Container.objects.get(code="PRD-1").location.code == "ASSEMBLY-LINE-1"


def test_successful_operation_broadcasts_after_commit(
    api_client, seeded_locations, django_capture_on_commit_callbacks
):
    channel_layer = get_channel_layer()
    channel_name = async_to_sync(channel_layer.new_channel)()
    async_to_sync(channel_layer.group_add)(CONTAINER_UPDATES_GROUP, channel_name)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        run(api_client, "receive", container_code="C-1", sku="SKU-1", quantity="1")

    assert len(callbacks) == 1
    event = async_to_sync(channel_layer.receive)(channel_name)
    assert event == {
        "type": "container_changed",
        "message": {"operation": "receive", "containers": ["C-1"]},
    }
    async_to_sync(channel_layer.group_discard)(CONTAINER_UPDATES_GROUP, channel_name)


def test_failed_operation_does_not_broadcast(api_client, seeded_locations, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        run(api_client, "pick", container_code="NOPE")

    assert callbacks == []


# === Дашборд ===

def test_dashboard_lists_containers_with_summary(api_client, seeded_locations):
    Item.objects.create(sku="SKU-1", name="Bolt M8")
    make(seeded_locations["A-01-01"], code="C-2")
    make(seeded_locations["RECEIVING"], code="C-1", status=Container.Status.PENDING_QC)
    make(seeded_locations["A-01-01"], code="C-3", sku=None, quantity=None, status=Container.Status.IDLE)

    response = api_client.get(reverse("dashboard"))

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["by_status"] == {"Pending_QC": 1, "Stored": 1, "Idle": 1}
    assert body["overview"] == {"total": 3, "pending_qc": 1, "stored": 1, "in_transit": 0}
    assert [row["code"] for row in body["containers"]] == ["C-1", "C-2", "C-3"]
    assert body["containers"][0]["location_code"] == "RECEIVING"
    assert body["containers"][0]["item_name"] == "Bolt M8"
    assert body["containers"][2]["status_label"] == "Idle"


def test_dashboard_on_empty_store(api_client, db):
    body = api_client.get(reverse("dashboard")).json()

    assert body["total"] == 0
    assert body["containers"] == []


# === Чтение тары и локаций ===

def test_container_list_filters_by_status_and_location(api_client, seeded_locations):
    make(seeded_locations["A-01-01"], code="C-1")
    make(seeded_locations["RECEIVING"], code="C-2", status=Container.Status.PENDING_QC)

    by_status = api_client.get(reverse("container-list"), {"status": "Stored"}).json()
    by_location = api_client.get(reverse("container-list"), {"location__code": "RECEIVING"}).json()

    assert [row["code"] for row in by_status] == ["C-1"]
    assert [row["code"] for row in by_location] == ["C-2"]


def test_container_detail_by_code(api_client, seeded_locations):
    make(seeded_locations["A-01-01"], code="C-7")

    body = api_client.get(reverse("container-detail", args=["C-7"])).json()

    assert body["code"] == "C-7"
    assert body["location_code"] == "A-01-01"
    assert body["status_label"] == "Stored"
    assert body["item_name"] is None


def test_containers_are_read_only_over_rest(api_client, seeded_locations):
    response = api_client.post(reverse("container-list"), {"code": "C-9"}, format="json")

    assert response.status_code == 405


def test_location_list(api_client, seeded_locations):
    body = api_client.get(reverse("location-list"), {"location_type": "dock"}).json()

    assert [row["code"] for row in body] == ["RECEIVING"]


def test_admin_changelists_render(admin_client, seeded_locations):
    make(seeded_locations["A-01-01"])

    for name in ("admin:containers_container_changelist", "admin:containers_location_changelist"):
        assert admin_client.get(reverse(name)).status_code == 200
