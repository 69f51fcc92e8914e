import pytest

from dattra.fees import build_procedure_input, build_procedure_lines, move_line, move_row
from tests.conftest import make_line


@pytest.fixture
def form():
    return {
        'code': " 04.07.03.003-4 ",
        'point_count': "100",
        'value_sp': "R$ 1.000,00",
        'value_sh': "R$ 500,00",
        'value_tsp': "",
        'surcharge_percent': "10",
        'surcharge_enabled': True,
        'assistant_count': 1,
        'anesthesia_enabled': True,
    }


class TestBuildProcedureInput:
    def test_parses_form_fields(self, form):
        procedure = build_procedure_input(form)
        assert procedure.code == "04.07.03.003-4"
        assert procedure.point_count == 100
        assert procedure.value_sp == pytest.approx(1000)
        assert procedure.value_sh == pytest.approx(500)
        assert procedure.value_tsp == 0.0
        assert procedure.surcharge_percent == 10
        assert procedure.assistant_count == 1
        assert procedure.anesthesia_enabled is True

    def test_surcharge_switch_off_ignores_percent(self, form):
        form['surcharge_enabled'] = False
        assert build_procedure_input(form).surcharge_percent == 0

    def test_malformed_values_become_zero(self):
        procedure = build_procedure_input({'code': None, 'point_count': "abc", 'value_sp': "x",
                                           'surcharge_percent': "-5", 'assistant_count': "9"})
        assert procedure.code == ""
        assert procedure.point_count == 0
        assert procedure.value_sp == 0.0
        assert procedure.surcharge_percent == 0
        assert procedure.assistant_count == 5


class TestLines:
    def test_numbered_in_order(self, form):
        lines = build_procedure_lines([form, dict(form, description="Segundo")])
        assert [line.line_index for line in lines] == [1, 2]
        assert lines[1].description == "Segundo"
        assert lines[0].value_sp == pytest.approx(1000)

    def test_move_row_on_form_rows(self, form):
        rows = [dict(form, id=1), dict(form, id=2), dict(form, id=3)]
        assert [row['id'] for row in move_row(rows, 0, 1)] == [2, 1, 3]
        assert [row['id'] for row in move_row(rows, 2, 1)] == [1, 3, 2]
        assert [row['id'] for row in rows] == [1, 2, 3]

    @pytest.mark.parametrize("source, target", [(0, -1), (2, 3)])
    def test_move_row_past_the_edges_keeps_order(self, form, source, target):
        rows = [dict(form, id=1), dict(form, id=2), dict(form, id=3)]
        assert move_row(rows, source, target) == rows

    def test_move_line_renumbers(self):
        lines = [make_line(1, value_sh=1.0), make_line(2, value_sh=2.0), make_line(3, value_sh=3.0)]
        moved = move_line(lines, 2, 0)
        assert [line.value_sh for line in moved] == [3.0, 1.0, 2.0]
        assert [line.line_index for line in moved] == [1, 2, 3]
        assert [line.value_sh for line in lines] == [1.0, 2.0, 3.0]

    @pytest.mark.parametrize("source, target", [(0, 0), (-1, 1), (0, 5)])
    def test_move_line_out_of_range_is_noop(self, source, target):
        lines = [make_line(1), make_line(2)]
        assert move_line(lines, source, target) == lines
