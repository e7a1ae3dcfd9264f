"""Reply texts sent back to the chat.

Keeping the templates in one place keeps every reply consistent. Probability
is always rendered with one decimal place and the reason is quoted verbatim.
"""

from __future__ import annotations

from core.models import SpamClassification

APOLOGY_TEXT = "Извините, произошла ошибка при анализе сообщения"

STATUS_SPAM = "❌ СПАМ"
STATUS_SUSPECTED = "⚠️ ВОЗМОЖНО СПАМ"


def _details(classification: SpamClassification) -> list[str]:
    return [
        f"Вероятность: {classification.probability:.1f}%",
        f"Причина: {classification.reason}",
    ]


def format_deleted(classification: SpamClassification) -> str:
    lines = [STATUS_SPAM, "✅ Сообщение автоматически удалено", *_details(classification)]
    return "\n".join(lines)


def format_delete_failed(classification: SpamClassification) -> str:
    lines = [
        STATUS_SPAM,
        "⚠️ Внимание: обнаружен спам!",
        *_details(classification),
        "",
        "Не удалось автоматически удалить сообщение. "
        "Пожалуйста, убедитесь, что бот имеет права администратора на удаление сообщений.",
    ]
    return "\n".join(lines)


def format_suspected(classification: SpamClassification, threshold: float) -> str:
    lines = [
        STATUS_SUSPECTED,
        *_details(classification),
        "",
        f"Сообщение не удалено автоматически, так как вероятность спама ниже {threshold:.0f}%",
    ]
    return "\n".join(lines)
