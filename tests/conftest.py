"""Shared fixtures for the fee calculator tests."""

import pytest

from dattra.fees import FeeCalculator, ProcedureInput, ProcedureLine, ProcedureTable

PRINCIPAL_CODE = "04.15.01.001-2"


def make_line(index, value_sh=1000.0, value_sp=1000.0, **overrides):
    """Helper to create a ProcedureLine with minimal boilerplate."""
    fields = dict(
        code="04.07.03.003-4",
        point_count=100,
        value_sp=value_sp,
        value_sh=value_sh,
        value_tsp=0.0,
        surcharge_percent=0,
        assistant_count=0,
        anesthesia_enabled=False,
        line_index=index,
        description=f"Procedimento {index}",
    )
    fields.update(overrides)
    return ProcedureLine(**fields)


@pytest.fixture
def calculator():
    return FeeCalculator()


@pytest.fixture
def basic_procedure():
    # pointCount=100, SP=1000, SH=500, no extras
    return ProcedureInput(
        code="04.07.03.003-4",
        point_count=100,
        value_sp=1000.0,
        value_sh=500.0,
        value_tsp=0.0,
        surcharge_percent=0,
        assistant_count=0,
        anesthesia_enabled=False,
    )


@pytest.fixture
def procedure_table():
    return ProcedureTable.from_records([
        {"codigo": PRINCIPAL_CODE, "descricao": "TRATAMENTO C/ CIRURGIAS MULTIPLAS",
         "linha1": 70, "linha2": 30, "linha3": 0, "linha4": 0, "linha5": 0, "auxiliares": 2},
        {"codigo": "04.07.03.003-4", "descricao": "COLECISTECTOMIA",
         "linha1": 100, "linha2": 0, "linha3": 0, "linha4": 0, "linha5": 0, "auxiliares": 1},
        {"codigo": "04.15.03.001-3", "descricao": "TRATAMENTO CIRURGICO EM POLITRAUMATIZADO",
         "linha1": 100, "linha2": 0, "linha3": 75, "linha4": 50, "linha5": 0, "auxiliares": 3},
    ])


@pytest.fixture
def two_lines():
    return [make_line(1), make_line(2)]
