import json

import pytest

from app import create_app
from services.models import AnalysisResult
from services.rate_limiter import RateLimiter


class FakeGeminiClient:
    """Stands in for GeminiClient; returns canned text and records prompts."""

    def __init__(self, response_text="", error=None):
        self.response_text = response_text
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response_text


SAMPLE_ANALYSIS = {
    "summary": "Revenue grew steadily while costs stayed under control.",
    "kpis": {
        "revenue": "$1,200,000",
        "expenses": "$800,000",
        "netProfit": "$400,000",
        "growthRate": "12%",
        "totalAssets": "$2,500,000",
        "totalLiabilities": "$1,000,000",
        "cashFlow": "$350,000",
        "debtToEquityRatio": "0.67",
        "returnOnInvestment": "16%",
        "profitMargin": "33.3%",
    },
    "risks": ["Customer concentration", "Rising input costs"],
    "opportunities": ["Expansion into new regions"],
    "recommendations": ["Diversify the customer base", "Hedge input costs"],
}


@pytest.fixture
def sample_analysis_dict():
    return json.loads(json.dumps(SAMPLE_ANALYSIS))


@pytest.fixture
def sample_analysis():
    return AnalysisResult.from_dict(SAMPLE_ANALYSIS)


@pytest.fixture
def fake_client():
    return FakeGeminiClient(
        response_text="Here is the analysis:\n```json\n" + json.dumps(SAMPLE_ANALYSIS) + "\n```"
    )


@pytest.fixture
def app(fake_client):
    app = create_app(gemini_client=fake_client, rate_limiter=RateLimiter())
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_csv(rows, header="Item,Amount,Period"):
    lines = [header] + [f"Line item {i},{i * 1000},2024" for i in range(1, rows + 1)]
    return ("\n".join(lines) + "\n").encode("utf-8")
