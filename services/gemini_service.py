import json
import logging
import re

import google.generativeai as genai
from pydantic import ValidationError

from config import Config
from .exceptions import AIServiceError, ResponseParseError
from .models import KPI_FIELDS, AnalysisResult, KPIs

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Unable to generate detailed analysis. Please try again or contact support."
FALLBACK_ADVISORY = "Analysis unavailable - please review the report manually"

KPI_DESCRIPTIONS = {
    "revenue": "Revenue value with currency and period",
    "expenses": "Total expenses value with currency and period",
    "netProfit": "Net profit/loss value with currency and period",
    "growthRate": "Revenue/profit growth rate as percentage",
    "totalAssets": "Total assets value (if available)",
    "totalLiabilities": "Total liabilities value (if available)",
    "cashFlow": "Operating cash flow (if available)",
    "debtToEquityRatio": "Debt to equity ratio (if available)",
    "returnOnInvestment": "ROI percentage (if available)",
    "profitMargin": "Profit margin percentage (if available)",
}


class GeminiClient:
    """Thin wrapper around the Gemini SDK exposing generate(prompt) -> str."""

    def __init__(self, api_key=None, model_name=None):
        api_key = api_key or Config.GEMINI_API_KEY
        if not api_key:
            raise ValueError("GEMINI_API_KEY environment variable is required")

        genai.configure(api_key=api_key)
        self.model_name = model_name or Config.GEMINI_MODEL
        self.model = genai.GenerativeModel(self.model_name)

        self.generation_config = {
            "max_output_tokens": Config.GEMINI_MAX_OUTPUT_TOKENS,
            "temperature": Config.GEMINI_TEMPERATURE,
        }

    def generate(self, prompt: str) -> str:
        response = self.model.generate_content(
            prompt, generation_config=self.generation_config
        )
        if not response:
            raise ValueError("No response object returned from Gemini")

        response_text = self._extract_response_text(response)
        if response_text is None:
            raise ValueError("No text content in Gemini response")
        return response_text

    def _extract_response_text(self, response):
        try:
            if hasattr(response, "text") and response.text:
                return response.text
        except ValueError:
            # .text raises when the candidate was blocked or has several parts
            pass

        if hasattr(response, "candidates") and response.candidates:
            candidate = response.candidates[0]
            if hasattr(candidate, "content") and candidate.content:
                if hasattr(candidate.content, "parts") and candidate.content.parts:
                    text_parts = []
                    for part in candidate.content.parts:
                        if hasattr(part, "text") and part.text:
                            text_parts.append(part.text)
                    return "".join(text_parts)

        return None


class GeminiAnalysisService:
    def __init__(self, client):
        self.client = client
        self.default_prompt = self._get_default_prompt()

    def analyze(self, text: str, file_name: str, custom_prompt=None) -> AnalysisResult:
        """Run one analysis call and return a well-typed result.

        Content must already have passed ContentValidator. Upstream failures
        raise AIServiceError; malformed model output degrades to the fallback
        result instead of raising.
        """
        prompt = self.build_analysis_prompt(text, file_name, custom_prompt)
        logger.info(f"Sending {len(text)} characters from {file_name} to Gemini")

        response_text = self._generate(prompt)
        logger.info(f"Gemini response length: {len(response_text)} characters")

        try:
            return self.parse_analysis_response(response_text)
        except ResponseParseError as e:
            logger.warning(f"Falling back to placeholder analysis for {file_name}: {str(e)}")
            return self.fallback_result()

    def respond_to_query(self, message: str, analysis_context=None, report_excerpt=None) -> str:
        prompt = self.build_chat_prompt(message, analysis_context, report_excerpt)
        response_text = self._generate(prompt)
        if not response_text.strip():
            raise AIServiceError("Gemini returned an empty chat response")
        return response_text

    def _generate(self, prompt):
        try:
            return self.client.generate(prompt)
        except Exception as e:
            logger.error(f"Gemini API error: {str(e)}")
            raise AIServiceError(f"Gemini API error: {str(e)}") from e

    def build_analysis_prompt(self, text, file_name, custom_prompt=None):
        preamble = custom_prompt.strip() if custom_prompt and custom_prompt.strip() else self.default_prompt
        kpi_lines = ",\n".join(
            f'    "{name}": "{KPI_DESCRIPTIONS[name]}"' for name in KPI_FIELDS
        )

        return f"""{preamble}

File Name: {file_name}

Financial Report Content:
{text}

Please provide your analysis in the following JSON format:
{{
  "summary": "A comprehensive summary of the financial report (3-4 sentences)",
  "kpis": {{
{kpi_lines}
  }},
  "risks": [
    "List of identified financial risks",
    "Each risk as a separate string"
  ],
  "opportunities": [
    "List of identified opportunities",
    "Each opportunity as a separate string"
  ],
  "recommendations": [
    "List of actionable recommendations",
    "Each recommendation as a separate string"
  ]
}}

Important: Respond only with a single valid JSON object. If a KPI value is not available in the report, use "N/A" as the value instead of estimating one.
"""

    def build_chat_prompt(self, message, analysis_context=None, report_excerpt=None):
        prompt = f"""You are a financial analysis expert. Answer the following query about financial data.

User Query: {message}
"""

        if analysis_context is not None:
            kpis = analysis_context.kpis
            prompt += f"""
Previous Analysis Summary: {analysis_context.summary}

Key Financial Metrics:
- Revenue: {kpis.revenue}
- Expenses: {kpis.expenses}
- Net Profit: {kpis.net_profit}
- Growth Rate: {kpis.growth_rate}

Known Risks: {', '.join(analysis_context.risks) or 'None identified'}
Known Opportunities: {', '.join(analysis_context.opportunities) or 'None identified'}
"""

        if report_excerpt:
            limit = Config.CHAT_REPORT_EXCERPT_CHARS
            prompt += f"""
Original Report Content (first {limit} characters):
{report_excerpt[:limit]}...
"""

        prompt += """
Please provide a helpful, accurate, and professional response to the user's query.
If you cannot answer based on the available data, clearly state that limitation.
"""
        return prompt

    def parse_analysis_response(self, response_text) -> AnalysisResult:
        parsed = self._extract_json_object(response_text)
        try:
            return AnalysisResult.model_validate(parsed)
        except ValidationError as e:
            raise ResponseParseError(f"Analysis JSON failed validation: {str(e)}") from e

    def _extract_json_object(self, response_text):
        if not response_text or not response_text.strip():
            raise ResponseParseError("Empty response from Gemini API")

        start = response_text.find("{")
        if start == -1:
            raise ResponseParseError(
                f"No JSON object found in response: {response_text[:200]}"
            )

        try:
            parsed, _ = json.JSONDecoder().raw_decode(response_text, start)
        except json.JSONDecodeError:
            end = response_text.rfind("}") + 1
            json_text = self._fix_common_json_issues(response_text[start:end])
            try:
                parsed = json.loads(json_text)
            except json.JSONDecodeError as e:
                raise ResponseParseError(
                    f"Failed to parse JSON response from Gemini: {str(e)}"
                ) from e

        if not isinstance(parsed, dict):
            raise ResponseParseError("Gemini response JSON is not an object")
        return parsed

    def _fix_common_json_issues(self, json_text):
        json_text = re.sub(r",(\s*[}\]])", r"\1", json_text)
        json_text = re.sub(r",,+", ",", json_text)
        return json_text

    @staticmethod
    def fallback_result() -> AnalysisResult:
        return AnalysisResult(
            summary=FALLBACK_SUMMARY,
            kpis=KPIs(),
            risks=[FALLBACK_ADVISORY],
            opportunities=[FALLBACK_ADVISORY],
            recommendations=[FALLBACK_ADVISORY],
        )

    def _get_default_prompt(self):
        return """You are an expert financial analyst with extensive experience in analyzing financial reports, statements, and business documents.

Your task is to analyze the provided financial report and extract key insights including:

1. A comprehensive summary highlighting the main financial performance indicators
2. Key Performance Indicators (KPIs) with specific numerical values where available
3. Financial risks that could impact the business
4. Growth opportunities and positive trends
5. Actionable recommendations for improvement

Please be thorough but concise in your analysis. Focus on:
- Revenue trends and patterns
- Expense management and cost structure
- Profitability and margins
- Cash flow situation
- Asset utilization
- Debt levels and financial stability
- Market position and competitive advantages
- Seasonal variations or cyclical patterns

If specific numerical data is not clearly stated in the report, indicate "N/A" rather than making assumptions."""
