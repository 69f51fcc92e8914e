import pandas as pd
import pytest

from dattra.fees import ProcedureTable
from dattra.fees.procedures import DEFAULT_MAX_LINES, TABLE_COLUMNS
from tests.conftest import PRINCIPAL_CODE


class TestLookup:
    def test_percentages_in_line_order(self, procedure_table):
        assert procedure_table.get_percentages(PRINCIPAL_CODE) == [70.0, 30.0]

    def test_zero_percentages_are_dropped(self, procedure_table):
        # 100, 0, 75, 50, 0: the zero in line 2 shifts 75 into position 2
        assert procedure_table.get_percentages("04.15.03.001-3") == [100.0, 75.0, 50.0]

    def test_unknown_code(self, procedure_table):
        assert procedure_table.get_percentages("09.99.99.999-9") == []
        assert procedure_table.get_procedure("09.99.99.999-9") is None
        assert procedure_table.describe("09.99.99.999-9") == ""
        assert procedure_table.suggested_assistants("09.99.99.999-9") == 0
        assert "09.99.99.999-9" not in procedure_table

    def test_procedure_info(self, procedure_table):
        info = procedure_table.get_procedure("04.07.03.003-4")
        assert info.description == "COLECISTECTOMIA"
        assert info.suggested_assistants == 1
        assert info.to_dict()['percentages'] == [100.0]

    def test_returned_percentages_are_copies(self, procedure_table):
        procedure_table.get_percentages(PRINCIPAL_CODE).append(10)
        assert procedure_table.get_percentages(PRINCIPAL_CODE) == [70.0, 30.0]


class TestMaxLines:
    def test_known_code(self, procedure_table):
        assert procedure_table.max_lines(PRINCIPAL_CODE) == 2
        assert procedure_table.max_lines("04.15.03.001-3") == 3

    @pytest.mark.parametrize("code", [None, "", "09.99.99.999-9"])
    def test_defaults_to_five(self, procedure_table, code):
        assert procedure_table.max_lines(code) == DEFAULT_MAX_LINES == 5


class TestSearch:
    def test_by_description(self, procedure_table):
        results = procedure_table.search("colecist")
        assert [p.code for p in results] == ["04.07.03.003-4"]

    def test_by_unmasked_code(self, procedure_table):
        results = procedure_table.search("0415010")
        assert [p.code for p in results] == [PRINCIPAL_CODE]

    def test_limit_and_blank(self, procedure_table):
        assert len(procedure_table.search("04", limit=2)) == 2
        assert procedure_table.search("   ") == []


class TestLoading:
    def test_bundled_table(self):
        table = ProcedureTable.from_csv()
        assert len(table) >= 10
        assert table.get_percentages("04.15.01.001-2") == [100.0, 75.0, 75.0, 60.0, 50.0]
        assert table.max_lines("04.15.02.006-9") == 3
        # codes keep their leading zero
        assert "04.07.03.003-4" in table

    def test_csv_file(self, tmp_path):
        path = tmp_path / "table.csv"
        path.write_text("codigo,descricao,linha1,linha2,linha3,linha4,linha5,auxiliares\n"
                        "04.15.01.001-2,MULTIPLAS,100,,abc,0,0,2\n", encoding="utf-8")
        table = ProcedureTable.from_csv(path)
        assert table.get_percentages("04.15.01.001-2") == [100.0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ProcedureTable.from_csv(tmp_path / "missing.csv")

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="missing columns"):
            ProcedureTable(pd.DataFrame([{"codigo": PRINCIPAL_CODE}]))

    def test_from_records_fills_missing_columns(self):
        table = ProcedureTable.from_records([{"codigo": PRINCIPAL_CODE, "linha1": 100}])
        assert table.get_percentages(PRINCIPAL_CODE) == [100.0]
        assert table.suggested_assistants(PRINCIPAL_CODE) == 0

    def test_to_dataframe(self, procedure_table):
        df = procedure_table.to_dataframe()
        assert list(df.columns) == TABLE_COLUMNS
        assert len(df) == 3
