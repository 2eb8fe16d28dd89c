import pytest
from rest_framework.test import APIClient

from containers.models import Location
from containers.services.lifecycle import LifecycleEngine
from tests.fakes import InMemoryContainerRepository, InMemoryLocationDirectory


@pytest.fixture
def locations():
    return InMemoryLocationDirectory()


@pytest.fixture
def repository(locations):
    return InMemoryContainerRepository(locations)


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def engine(repository, locations, notifications):
    return LifecycleEngine(
        repository,
        locations,
        notify=lambda operation, codes: notifications.append((operation, codes)),
    )


@pytest.fixture
def seeded_locations(db):
    return {
        code: Location.objects.create(code=code, location_type=location_type)
        for code, location_type in (
            ("RECEIVING", Location.LocationType.DOCK),
            ("ASSEMBLY-LINE-1", Location.LocationType.LINE),
            ("A-01-01", Location.LocationType.SHELF),
        )
    }


@pytest.fixture
def api_client():
    return APIClient()
