import pytest

from src.hrms_core.hrms_core.core.exceptions import ValidationError
from src.hrms_core.hrms_core.geofence.model import GeoFence, GeoPoint
from src.hrms_core.hrms_core.geofence.service import GeoFenceService


class FakeFencesRepo:
    def __init__(self, org_fences=(), employee_fences=None):
        self._org = list(org_fences)
        self._employee = dict(employee_fences or {})

    def list_active_for_organization(self, organization_id):
        return [f for f in self._org if f.organization_id == organization_id]

    def list_active_for_employee(self, organization_id, employee_id):
        return list(self._employee.get(employee_id, []))


HQ = GeoFence(geo_fence_id=1, organization_id=1, fence_name="HQ", center=GeoPoint(0.0, 0.0), radius_meters=100)
SITE = GeoFence(geo_fence_id=2, organization_id=1, fence_name="Site", center=GeoPoint(0.0, 1.0), radius_meters=100)


def test_employee_assignments_take_precedence_over_org_fences():
    svc = GeoFenceService(FakeFencesRepo([HQ, SITE], {7: [SITE]}))

    result = svc.validate_location(1, 0.0, 0.0, employee_id=7)

    assert result.is_valid is False
    assert result.nearest_fence_id == 2


def test_org_fences_used_when_employee_has_no_assignment():
    svc = GeoFenceService(FakeFencesRepo([HQ, SITE], {7: [SITE]}))

    assert svc.validate_location(1, 0.0, 0.0, employee_id=8).matched_fence_id == 1
    assert svc.validate_location(1, 0.0, 0.0).matched_fence_id == 1


def test_zero_configured_fences_is_fail_open_by_default():
    svc = GeoFenceService(FakeFencesRepo())

    assert svc.fail_open is True
    assert svc.validate_location(1, 45.0, 90.0).is_valid is True


def test_fail_closed_when_configured():
    svc = GeoFenceService(FakeFencesRepo(), fail_open=False)

    assert svc.validate_location(1, 45.0, 90.0).is_valid is False


@pytest.mark.parametrize("lat, lon", [(None, 0.0), (0.0, None), (91.0, 0.0), (0.0, 181.0), ("abc", 0.0)])
def test_invalid_coordinates_are_rejected(lat, lon):
    svc = GeoFenceService(FakeFencesRepo([HQ]))

    with pytest.raises(ValidationError):
        svc.validate_location(1, lat, lon)
