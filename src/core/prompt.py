"""Classification prompt for the completion service."""

from __future__ import annotations

from core.models import ClassificationRequest

# The message text is substituted once, verbatim, between the quote markers.
# The JSON example doubles as the shape the verdict parser validates.
PROMPT_TEMPLATE = """Проанализируй текст на признаки спама и верни результат строго в формате JSON.

Текст для анализа: '{text}'

Верни ответ в следующем формате (замени значения, сохраняя структуру):
{{
  "spam_indicators": {{
    "excessive_caps": false,
    "suspicious_links": false,
    "aggressive_cta": false,
    "unrealistic_promises": false,
    "explanation": "В тексте нет признаков спама"
  }},
  "context_usefulness": "Текст содержит полезную информацию",
  "language_features": "Естественный язык общения",
  "classification": {{
    "is_spam": false,
    "probability": 5,
    "reason": "Обычное сообщение без признаков спама"
  }}
}}"""


def render_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


def build_request(model: str, text: str) -> ClassificationRequest:
    """Build a fresh classification request for one message."""

    return ClassificationRequest(model=model, prompt=render_prompt(text))
