import pytest
from sqlalchemy.exc import IntegrityError

from ponto.models.company_settings import CompanySettings, SINGLETON_ID
from ponto.models.point import Point
from ponto.utils.datetime_utils import utc_now


def make_point(user_id, **overrides):
    values = dict(
        user_id=user_id,
        type="entrada",
        timestamp=utc_now(),
        latitude=-23.5505,
        longitude=-46.6333,
        accuracy_meters=10.0,
        photo_reference=f"{user_id}/photo.jpeg",
        fingerprint="fp-model-0001",
        distance_meters=0.0,
        within_geofence=True,
        status="pendente",
    )
    values.update(overrides)
    return Point(**values)


@pytest.mark.parametrize("overrides", [{"type": "lanche"}, {"status": "cancelado"}])
def test_point_rejects_unknown_type_and_status(db, colaborador, overrides):
    db.add(make_point(colaborador.id, **overrides))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_point_accepts_known_values(db, colaborador):
    db.add(make_point(colaborador.id, type="almoco", status="aprovado"))
    db.commit()

    assert db.query(Point).count() == 1


@pytest.mark.parametrize("radius", [0, -10])
def test_company_settings_radius_must_be_positive(db, radius):
    db.add(CompanySettings(
        id=SINGLETON_ID,
        geofence_center_lat=-23.5505,
        geofence_center_lng=-46.6333,
        geofence_radius=radius,
    ))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
