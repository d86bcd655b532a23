"""
Prompt templates for batch ticker analysis.
"""

from typing import Dict, List, Sequence

SYSTEM_PROMPT = (
    "You are a financial analyst. Every reply must be a single JSON object with no "
    "surrounding prose. Research current information before answering."
)

USER_PROMPT_TEMPLATE = """Analyze the following stock tickers: {tickers}.
Return one JSON object with this shape:
{{
  "as_of": "<ISO-8601 timestamp of the analysis>",
  "tickers": [
    {{
      "ticker": "<symbol>",
      "short_term": {{"recommendation": "ACCUMULATE|HOLD|AVOID", "confidence": 0-100, "reason": "..."}},
      "long_term": {{"recommendation": "ACCUMULATE|HOLD|AVOID", "confidence": 0-100, "reason": "..."}},
      "strategies": [{{"name": "...", "stance": "FAVORABLE|NEUTRAL|UNFAVORABLE", "note": "..."}}],
      "overall": {{"recommendation": "ACCUMULATE|HOLD|AVOID", "confidence": 0-100, "reason": "..."}}
    }}
  ],
  "sources": ["<url>", "..."]
}}
Give at least 5 strategies per ticker and list every URL you consulted in sources."""


def build_user_prompt(tickers: Sequence[str]) -> str:
    return USER_PROMPT_TEMPLATE.format(tickers=", ".join(tickers))


def build_messages(tickers: Sequence[str]) -> List[Dict[str, str]]:
    """System + user messages for a chat-completions request"""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(tickers)},
    ]
