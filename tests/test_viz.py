"""
Tests for published page content: chart script and body HTML.
"""

from opendatabot.schemas.analysis import ChartSelectResponse, DataEntry, SQLResponse
from opendatabot.services.viz import render_chart_js, render_module_body


def _chart(kind: str = "bar", currency: bool = False) -> ChartSelectResponse:
    return ChartSelectResponse(
        chart=kind,
        title="Net expenditure",
        data=[DataEntry(label="2021", value=1.5), DataEntry(label="2022", value=2.5)],
        value_is_currency=currency,
    )


class TestRenderChartJs:
    """Tests for render_chart_js()."""

    def test_bar_chart(self) -> None:
        js = render_chart_js(_chart("bar"))
        assert '"type": "bar"' in js
        assert '"labels": ["2021", "2022"]' in js
        assert '"data": [1.5, 2.5]' in js
        assert 'document.getElementById("chart")' in js
        assert "new Chart(canvas, config);" in js
        assert "Intl.NumberFormat" not in js

    def test_chart_type_follows_selection(self) -> None:
        assert '"type": "line"' in render_chart_js(_chart("line"))
        assert '"type": "pie"' in render_chart_js(_chart("pie"))

    def test_unknown_chart_draws_bars(self) -> None:
        assert '"type": "bar"' in render_chart_js(_chart("treemap"))

    def test_scatter_uses_points(self) -> None:
        js = render_chart_js(_chart("scatter"))
        assert '"type": "scatter"' in js
        assert '{"x": "2021", "y": 1.5}' in js

    def test_currency_formatting(self) -> None:
        js = render_chart_js(_chart("bar", currency=True))
        assert 'new Intl.NumberFormat("en-CA"' in js
        assert 'currency: "CAD"' in js
        assert "config.options.scales.y" in js

    def test_pie_currency_has_no_axis(self) -> None:
        js = render_chart_js(_chart("pie", currency=True))
        assert "Intl.NumberFormat" in js
        assert "config.options.scales.y" not in js

    def test_custom_element_id(self) -> None:
        assert 'document.getElementById("budget-chart")' in render_chart_js(_chart(), element_id="budget-chart")

    def test_script_close_tag_escaped(self) -> None:
        chart = ChartSelectResponse(chart="bar", title="</script><script>alert(1)", data=[])
        js = render_chart_js(chart)
        assert "</script>" not in js
        assert "<\\/script>" in js


class TestRenderModuleBody:
    """Tests for render_module_body()."""

    def test_contains_question_table_and_sql(self) -> None:
        sql = SQLResponse(sql="SELECT year FROM operating_budget", applicability="Budget data covers this.")
        body = render_module_body("Police budget?", sql, "year\n2021")
        assert '<p class="question">Police budget?</p>' in body
        assert '<div id="chart" class="chart"></div>' in body
        assert '<pre class="data-table">year\n2021</pre>' in body
        assert "SELECT year FROM operating_budget" in body
        assert "Budget data covers this." in body
        assert "missing-data" not in body

    def test_missing_data_note(self) -> None:
        body = render_module_body("q", SQLResponse(sql="SELECT 1", missing_data="ward totals"), "n\n1")
        assert '<p class="missing-data">Missing data: ward totals</p>' in body

    def test_user_text_is_escaped(self) -> None:
        sql = SQLResponse(sql="SELECT * FROM t WHERE a < 3")
        body = render_module_body("<b>budget</b> & more", sql, "a\n<1>")
        assert "&lt;b&gt;budget&lt;/b&gt; &amp; more" in body
        assert "a &lt; 3" in body
        assert "&lt;1&gt;" in body
        assert "<b>" not in body
