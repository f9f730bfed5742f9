from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_AVAILABLE = "N/A"
SUMMARY_NOT_AVAILABLE = "Analysis summary not available"

FileType = Literal["pdf", "excel", "csv"]

# Wire names, in prompt order.
KPI_FIELDS = (
    "revenue",
    "expenses",
    "netProfit",
    "growthRate",
    "totalAssets",
    "totalLiabilities",
    "cashFlow",
    "debtToEquityRatio",
    "returnOnInvestment",
    "profitMargin",
)


class FileMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias="fileName")
    file_type: FileType = Field(alias="fileType")
    page_count: Optional[int] = Field(None, alias="pageCount")
    sheet_count: Optional[int] = Field(None, alias="sheetCount")
    extracted_at: datetime = Field(alias="extractedAt")


class ParsedFileContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    metadata: FileMetadata

    def to_dict(self):
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


def _kpi_value(value):
    if value is None or isinstance(value, bool):
        return NOT_AVAILABLE
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or NOT_AVAILABLE
    return NOT_AVAILABLE


class KPIs(BaseModel):
    """Ten named metrics, each a display string or "N/A"; never missing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    revenue: str = NOT_AVAILABLE
    expenses: str = NOT_AVAILABLE
    net_profit: str = Field(NOT_AVAILABLE, alias="netProfit")
    growth_rate: str = Field(NOT_AVAILABLE, alias="growthRate")
    total_assets: str = Field(NOT_AVAILABLE, alias="totalAssets")
    total_liabilities: str = Field(NOT_AVAILABLE, alias="totalLiabilities")
    cash_flow: str = Field(NOT_AVAILABLE, alias="cashFlow")
    debt_to_equity_ratio: str = Field(NOT_AVAILABLE, alias="debtToEquityRatio")
    return_on_investment: str = Field(NOT_AVAILABLE, alias="returnOnInvestment")
    profit_margin: str = Field(NOT_AVAILABLE, alias="profitMargin")

    @field_validator("*", mode="before")
    @classmethod
    def default_to_not_available(cls, value):
        return _kpi_value(value)

    def to_dict(self):
        return self.model_dump(by_alias=True)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str = SUMMARY_NOT_AVAILABLE
    kpis: KPIs = Field(default_factory=KPIs)
    risks: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def summary_or_placeholder(cls, value):
        if not isinstance(value, str) or not value.strip():
            return SUMMARY_NOT_AVAILABLE
        return value.strip()

    @field_validator("kpis", mode="before")
    @classmethod
    def kpis_mapping(cls, value):
        if isinstance(value, (KPIs, dict)):
            return value
        return {}

    @field_validator("risks", "opportunities", "recommendations", mode="before")
    @classmethod
    def string_list(cls, value):
        if not isinstance(value, list):
            return []
        items = []
        for item in value:
            if item is None or isinstance(item, (dict, list)):
                continue
            text = str(item).strip()
            if text:
                items.append(text)
        return items

    @classmethod
    def from_dict(cls, data):
        return cls.model_validate(data if isinstance(data, dict) else {})

    def to_dict(self):
        return self.model_dump(by_alias=True)


class ChartData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["bar", "pie", "area", "line"]
    title: str
    data: List[Dict[str, Any]]
    x_axis_key: Optional[str] = Field(None, alias="xAxisKey")
    y_axis_key: Optional[str] = Field(None, alias="yAxisKey")
    data_key: Optional[str] = Field(None, alias="dataKey")

    def to_dict(self):
        payload = self.model_dump(by_alias=True)
        for key in ("xAxisKey", "yAxisKey", "dataKey"):
            if payload[key] is None:
                del payload[key]
        return payload


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    type: Literal["positive", "negative", "neutral"]
    importance: Literal["high", "medium", "low"]

    def to_dict(self):
        return self.model_dump()


class Dashboard(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chart_data: List[ChartData] = Field(default_factory=list, alias="chartData")
    insights: List[Insight] = Field(default_factory=list)

    def to_dict(self):
        return {
            "chartData": [chart.to_dict() for chart in self.chart_data],
            "insights": [insight.to_dict() for insight in self.insights],
        }


class ExportMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    generated_at: datetime = Field(alias="generatedAt")
    analysis_id: Optional[str] = Field(None, alias="analysisId")
    dashboard_id: Optional[str] = Field(None, alias="dashboardId")
    file_name: Optional[str] = Field(None, alias="fileName")


class ExportData(BaseModel):
    """Flat report shape shared by every export format.

    Section fields are None when the caller filtered them out.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    summary: Optional[str] = None
    kpis: Optional[KPIs] = None
    charts: Optional[List[ChartData]] = None
    insights: Optional[List[Insight]] = None
    risks: Optional[List[str]] = None
    opportunities: Optional[List[str]] = None
    recommendations: Optional[List[str]] = None
    metadata: ExportMetadata

    def to_dict(self):
        payload = {"title": self.title}
        if self.summary is not None:
            payload["summary"] = self.summary
        if self.kpis is not None:
            payload["kpis"] = self.kpis.to_dict()
        if self.charts is not None:
            payload["charts"] = [chart.to_dict() for chart in self.charts]
        if self.insights is not None:
            payload["insights"] = [insight.to_dict() for insight in self.insights]
        for key in ("risks", "opportunities", "recommendations"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = list(value)
        payload["metadata"] = self.metadata.model_dump(
            by_alias=True, mode="json", exclude_none=True
        )
        return payload
