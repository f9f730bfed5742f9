import re
from datetime import datetime, timezone

from .formatting import format_compact_currency
from .models import (
    NOT_AVAILABLE,
    ChartData,
    Dashboard,
    ExportData,
    ExportMetadata,
    Insight,
)

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

EXPORT_SECTIONS = (
    "summary",
    "kpis",
    "charts",
    "insights",
    "risks",
    "opportunities",
    "recommendations",
)


def _leading_number(text):
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group(0))


def extract_numeric_value(value):
    """Parse a display string such as "$1,200,000" or "(500)" into a float.

    Parentheses mean negative. Returns None for "N/A" or anything without a
    leading number once currency symbols, commas, percent signs and
    whitespace are removed.
    """
    if not value or value == NOT_AVAILABLE:
        return None

    cleaned = re.sub(r"[$,\s%]", "", value)
    is_negative = "(" in cleaned and ")" in cleaned
    number = _leading_number(cleaned.replace("(", "").replace(")", ""))
    if number is None:
        return None
    return -number if is_negative else number


def extract_percentage_value(value):
    if not value or value == NOT_AVAILABLE:
        return None
    return _leading_number(re.sub(r"[%\s]", "", value))


class DashboardService:
    @staticmethod
    def generate_dashboard(analysis) -> Dashboard:
        return Dashboard(
            chart_data=DashboardService.generate_chart_data(analysis),
            insights=DashboardService.generate_insights(analysis),
        )

    @staticmethod
    def generate_chart_data(analysis):
        charts = []
        kpis = analysis.kpis

        charts.append(
            ChartData(
                type="bar",
                title="Financial Overview",
                data=[
                    {
                        "category": "Revenue",
                        "value": extract_numeric_value(kpis.revenue),
                        "formatted": kpis.revenue,
                    },
                    {
                        "category": "Expenses",
                        "value": extract_numeric_value(kpis.expenses),
                        "formatted": kpis.expenses,
                    },
                    {
                        "category": "Net Profit",
                        "value": extract_numeric_value(kpis.net_profit),
                        "formatted": kpis.net_profit,
                    },
                ],
                x_axis_key="category",
                y_axis_key="value",
            )
        )

        asset_value = extract_numeric_value(kpis.total_assets)
        liability_value = extract_numeric_value(kpis.total_liabilities)
        if asset_value is not None and liability_value is not None and asset_value > 0:
            equity = asset_value - liability_value
            charts.append(
                ChartData(
                    type="pie",
                    title="Balance Sheet Composition",
                    data=[
                        {"name": "Assets", "value": asset_value, "formatted": kpis.total_assets},
                        {
                            "name": "Liabilities",
                            "value": liability_value,
                            "formatted": kpis.total_liabilities,
                        },
                        {
                            "name": "Equity",
                            "value": max(0.0, equity),
                            "formatted": format_compact_currency(equity),
                        },
                    ],
                    data_key="value",
                )
            )

        performance = []
        for label, formatted in (
            ("Growth Rate", kpis.growth_rate),
            ("Profit Margin", kpis.profit_margin),
            ("ROI", kpis.return_on_investment),
        ):
            value = extract_percentage_value(formatted)
            if value is not None:
                performance.append({"metric": label, "value": value, "formatted": formatted})

        if performance:
            charts.append(
                ChartData(
                    type="area",
                    title="Performance Metrics",
                    data=performance,
                    x_axis_key="metric",
                    y_axis_key="value",
                )
            )

        charts.append(
            ChartData(
                type="bar",
                title="Risk vs Opportunity Analysis",
                data=[
                    {
                        "category": "Risks Identified",
                        "value": len(analysis.risks),
                        "items": list(analysis.risks),
                    },
                    {
                        "category": "Opportunities Found",
                        "value": len(analysis.opportunities),
                        "items": list(analysis.opportunities),
                    },
                    {
                        "category": "Recommendations",
                        "value": len(analysis.recommendations),
                        "items": list(analysis.recommendations),
                    },
                ],
                x_axis_key="category",
                y_axis_key="value",
            )
        )

        return charts

    @staticmethod
    def generate_insights(analysis):
        insights = []
        kpis = analysis.kpis

        net_profit = extract_numeric_value(kpis.net_profit)
        if net_profit is not None:
            insights.append(
                Insight(
                    id="profitability",
                    title="Profitability Analysis",
                    description=(
                        f"Company shows positive profitability with net profit of {kpis.net_profit}"
                        if net_profit > 0
                        else f"Company has negative profitability with net loss of {kpis.net_profit}"
                    ),
                    type="positive" if net_profit > 0 else "negative",
                    importance="high",
                )
            )

        growth_rate = extract_percentage_value(kpis.growth_rate)
        if growth_rate is not None:
            if growth_rate > 5:
                growth_type = "positive"
            elif growth_rate < 0:
                growth_type = "negative"
            else:
                growth_type = "neutral"
            insights.append(
                Insight(
                    id="growth",
                    title="Growth Performance",
                    description=(
                        f"Strong growth trajectory with {kpis.growth_rate} growth rate"
                        if growth_rate > 0
                        else f"Declining performance with {kpis.growth_rate} growth rate"
                    ),
                    type=growth_type,
                    importance="high",
                )
            )

        cash_flow = extract_numeric_value(kpis.cash_flow)
        if cash_flow is not None:
            insights.append(
                Insight(
                    id="cashflow",
                    title="Cash Flow Status",
                    description=(
                        f"Healthy cash flow from operations: {kpis.cash_flow}"
                        if cash_flow > 0
                        else f"Negative cash flow requiring attention: {kpis.cash_flow}"
                    ),
                    type="positive" if cash_flow > 0 else "negative",
                    importance="high",
                )
            )

        risk_count = len(analysis.risks)
        if risk_count > 0:
            insights.append(
                Insight(
                    id="risks",
                    title="Risk Assessment",
                    description=f"{risk_count} potential risks identified that require management attention",
                    type="negative" if risk_count > 3 else "neutral",
                    importance="high" if risk_count > 3 else "medium",
                )
            )

        opportunity_count = len(analysis.opportunities)
        if opportunity_count > 0:
            insights.append(
                Insight(
                    id="opportunities",
                    title="Growth Opportunities",
                    description=f"{opportunity_count} growth opportunities identified for business expansion",
                    type="positive",
                    importance="medium",
                )
            )

        debt_ratio = extract_numeric_value(kpis.debt_to_equity_ratio)
        if debt_ratio is not None:
            if debt_ratio > 1.5:
                leverage_type = "negative"
            elif debt_ratio > 1:
                leverage_type = "neutral"
            else:
                leverage_type = "positive"
            insights.append(
                Insight(
                    id="leverage",
                    title="Financial Leverage",
                    description=(
                        f"High leverage with debt-to-equity ratio of {kpis.debt_to_equity_ratio}"
                        if debt_ratio > 1
                        else f"Conservative leverage with debt-to-equity ratio of {kpis.debt_to_equity_ratio}"
                    ),
                    type=leverage_type,
                    importance="high" if debt_ratio > 1.5 else "medium",
                )
            )

        return insights

    @staticmethod
    def generate_export_data(
        analysis,
        dashboard,
        analysis_id=None,
        dashboard_id=None,
        file_name=None,
        generated_at=None,
    ) -> ExportData:
        return ExportData(
            title="Financial Analysis Report",
            summary=analysis.summary,
            kpis=analysis.kpis,
            charts=list(dashboard.chart_data),
            insights=list(dashboard.insights),
            risks=list(analysis.risks),
            opportunities=list(analysis.opportunities),
            recommendations=list(analysis.recommendations),
            metadata=ExportMetadata(
                generated_at=generated_at or datetime.now(timezone.utc),
                analysis_id=analysis_id,
                dashboard_id=dashboard_id,
                file_name=file_name,
            ),
        )

    @staticmethod
    def filter_sections(export_data, sections):
        if not sections:
            return export_data
        dropped = {key: None for key in EXPORT_SECTIONS if key not in sections}
        return export_data.model_copy(update=dropped)
