"""
Root pytest configuration for backend tests.

Provides:
- backend/ on sys.path (imports like `from services.filter_engine import ...`)
- make_record: LandTransaction factory
- records_csv / boundaries_json: small fixture files on disk
- app / client: Flask test application built from the fixture files
"""

import json
import sys
from datetime import date
from pathlib import Path

# Add backend directory to Python path so imports like
# `from services.dashboard_service import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest

from models.transaction import LandTransaction


@pytest.fixture
def make_record():
    """
    Build a LandTransaction with sensible defaults.

    price_per_ha is derived like the normalizer does unless passed explicitly.
    `year` is a shortcut for a 1 January date in that year.
    """
    def _make(
        price=0.0,
        surface_ha=0.0,
        regions=(),
        year=None,
        transaction_date=None,
        price_per_ha='derive',
        **kwargs,
    ):
        if price_per_ha == 'derive':
            price_per_ha = price / surface_ha if price > 0 and surface_ha > 0 else None
        if transaction_date is None and year is not None:
            transaction_date = date(year, 1, 1)
        return LandTransaction(
            price=price,
            surface_ha=surface_ha,
            price_per_ha=price_per_ha,
            regions=tuple(regions),
            transaction_date=transaction_date,
            **kwargs,
        )
    return _make


RECORDS_CSV = """\
Tipo;Tipo de negocio;Nº expediente;Estado de ocupación;Precio total;Superficie total(ha);Padrones;Fecha ingreso trámite
Art. 35 Ley 11029;Compraventa;EXP-001;Libre;U$S 300.000,00;100;"Canelones->123; Florida->456";15/03/2019
Ofrecimiento directo;Compraventa;EXP-002;Ocupado;400000;100;Florida->789;02/06/2021
Art. 5;Arrendamiento;EXP-003;Libre;1.000.000,50;200;Canelones->1;10/10/2021
;;;;;;;
Directo;Compraventa;EXP-005;Parcialmente ocupado;abc;;Rivera->22;fecha
"""

BOUNDARIES = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {"NAME_1": "Canelones"},
         "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}},
        {"type": "Feature", "properties": {"NAME_1": "Florida"},
         "geometry": {"type": "Polygon", "coordinates": [[[1, 1], [2, 1], [2, 2], [1, 1]]]}},
        {"type": "Feature", "properties": {"NAME_1": "Artigas"},
         "geometry": {"type": "Polygon", "coordinates": [[[3, 3], [4, 3], [4, 4], [3, 3]]]}},
    ],
}


@pytest.fixture
def records_csv(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(RECORDS_CSV, encoding="utf-8")
    return str(path)


@pytest.fixture
def boundaries_json(tmp_path):
    path = tmp_path / "boundaries.geojson"
    path.write_text(json.dumps(BOUNDARIES), encoding="utf-8")
    return str(path)


@pytest.fixture
def app(records_csv, boundaries_json):
    """Create test Flask application over the fixture files."""
    from app import create_app

    app = create_app({
        'TESTING': True,
        'DATA_CSV_PATH': records_csv,
        'BOUNDARIES_PATH': boundaries_json,
        'CSV_DELIMITER': ';',
        'CSV_ENCODING': 'utf-8',
        'DEFAULT_WINDOW_YEARS': 5,
    })
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
