from dataclasses import replace

import pytest

from dattra.reports import CSVReportRenderer, HTMLReportRenderer
from tests.conftest import PRINCIPAL_CODE, make_line


@pytest.fixture
def html_renderer(tmp_path):
    return HTMLReportRenderer({'organization': "HOSPITAL TESTE", 'output_dir': str(tmp_path)})


@pytest.fixture
def aggregate(calculator, procedure_table):
    lines = [make_line(1, assistant_count=3, anesthesia_enabled=True), make_line(2, surcharge_percent=10)]
    return calculator.allocate_multiple(PRINCIPAL_CODE, lines, procedure_table)


class TestHTMLReport:
    def test_single_procedure(self, html_renderer, calculator, basic_procedure):
        result = calculator.allocate(replace(basic_procedure, anesthesia_enabled=True, assistant_count=1))
        html = html_renderer.render(result)
        assert "HOSPITAL TESTE" in html
        assert "R$ 1.500,00" in html
        assert "R$ 300,00" in html
        assert "R$ 538,46" in html
        assert "Total 1º Auxiliar" in html
        assert "Auxiliares 2º ao 5º" not in html
        assert "Detalhes por Linha" not in html
        assert "1 Auxiliar" in html

    def test_multiple_procedures(self, html_renderer, aggregate):
        html = html_renderer.render(aggregate)
        assert "Detalhes por Linha (2)" in html
        assert "Linha 1" in html and "Linha 2" in html
        assert "70% do valor SH" in html
        assert "30% do valor SH" in html
        assert "Múltiplos Procedimentos" in html
        assert "TRATAMENTO C/ CIRURGIAS MULTIPLAS" in html
        assert "Incremento 5.0%" in html
        assert "👥 3 Aux" in html

    def test_each_line_shows_its_own_settings(self, html_renderer, aggregate):
        html = html_renderer.render(aggregate)
        assert html.count('line-badges') == 2
        assert "👥 3 Aux" in html
        assert "% 10%" in html
        # once on line 1, once among the aggregate settings
        assert html.count("💉 Anestesia") == 2

    def test_assistant_totals_shown_when_owed(self, html_renderer, calculator, procedure_table):
        # one assistant on one line out of two: the mean assistant count is 0.5
        lines = [make_line(1, assistant_count=1), make_line(2)]
        result = calculator.allocate_multiple(PRINCIPAL_CODE, lines, procedure_table)
        html = html_renderer.render(result)
        assert result.assistant_count == pytest.approx(0.5)
        assert "Total 1º Auxiliar" in html
        assert "Valor 1º Auxiliar" in html
        assert "Auxiliares 2º ao 5º" not in html

    def test_other_assistants_shown_when_owed(self, html_renderer, calculator, procedure_table):
        lines = [make_line(1, assistant_count=2), make_line(2), make_line(3)]
        result = calculator.allocate_multiple("04.15.03.001-3", lines, procedure_table)
        html = html_renderer.render(result)
        assert "Total Auxiliares 2º ao 5º" in html

    def test_other_assistants_sum(self, html_renderer, aggregate):
        line = aggregate.lines[0]
        expected = line.second_assistant_value + line.third_assistant_value
        assert HTMLReportRenderer._other_assistants(line) == pytest.approx(expected)

    def test_values_are_escaped(self, html_renderer, aggregate):
        html = html_renderer.render(replace(aggregate, description="<script>"))
        assert "<script>" not in html

    def test_save(self, html_renderer, calculator, basic_procedure, tmp_path):
        path = html_renderer.save(calculator.allocate(basic_procedure))
        assert path.parent == tmp_path
        assert path.name.startswith("calculo_0407030034_")
        assert path.suffix == ".html"
        assert "R$ 1.500,00" in path.read_text(encoding="utf-8")


class TestCSVReport:
    def test_single_result_has_one_row(self, calculator, basic_procedure):
        df = CSVReportRenderer().to_dataframe(calculator.allocate(basic_procedure))
        assert len(df) == 1
        assert list(df.columns) == CSVReportRenderer.column_labels()
        assert df.loc[0, 'Linha'] == 1
        assert df.loc[0, 'Valor Total'] == pytest.approx(1500)

    def test_aggregate_ends_with_total_row(self, aggregate):
        df = CSVReportRenderer().to_dataframe(aggregate)
        assert len(df) == 3
        assert df.iloc[-1]['Linha'] == 'TOTAL'
        assert df.iloc[-1]['Código'] == PRINCIPAL_CODE
        assert df.iloc[-1]['Valor Total'] == pytest.approx(aggregate.total_procedure_value)
        assert df.iloc[0]['% SH'] == 70

    def test_render_uses_brazilian_separators(self, calculator, basic_procedure):
        text = CSVReportRenderer().render(calculator.allocate(basic_procedure))
        header, row = text.splitlines()[:2]
        assert header.startswith("Linha;Código;")
        assert "1500,0" in row

    def test_save(self, calculator, basic_procedure, tmp_path):
        path = CSVReportRenderer().save(calculator.allocate(basic_procedure), tmp_path / "calculo.csv")
        assert path.read_text(encoding="utf-8").startswith("Linha;")
