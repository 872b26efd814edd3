"""
Сборка промптов для LLM.

Назначение:
- summary по типу (short|medium|detailed) и языку
- перевод транскрипта с учётом предыдущего перевода (continuity)

Чистые функции: никаких вызовов провайдеров и настроек, кроме дефолтного языка.
"""

from __future__ import annotations

from speech_summary_agent.domain.enums import SummaryType

DEFAULT_SUMMARY_LANGUAGE_INSTRUCTION = "Summarize in English."

SUMMARY_LANGUAGE_INSTRUCTIONS: dict[str, str] = {
    "ja": "日本語で要約してください。",
    "es": "Summarize in Spanish.",
    "zh": "用中文总结。",
    "fr": "Résumez en français.",
    "it": "Riassumi in italiano.",
    "ko": "한국어로 요약해주세요.",
    "ar": "لخص باللغة العربية.",
    "hi": "हिंदी में संक्षेप करें।",
    "ru": "Резюмируйте на русском языке.",
    "id": "Ringkas dalam Bahasa Indonesia.",
}

TRANSLATION_LANGUAGE_NAMES: dict[str, str] = {
    "ja": "Japanese",
    "es": "Spanish",
    "zh": "Chinese",
    "fr": "French",
    "it": "Italian",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "ru": "Russian",
    "id": "Indonesian",
}

DEFAULT_TRANSLATION_LANGUAGE_NAME = "Japanese"

_SHORT_TEMPLATE = (
    "You are a professional executive assistant specializing in creating concise "
    "presentation summaries for C-level executives.\n\n"
    "Analyze the following transcript and provide a SHORT summary in exactly 4-5 lines. "
    "Focus on the most critical points, key decisions, and actionable outcomes. "
    "Write in a professional, executive-level tone suitable for busy decision-makers "
    "who need immediate insights. {language_instruction}\n\n"
    "Requirements:\n"
    "- Exactly 4-5 lines of text\n"
    "- No bullet points, lists, or markdown formatting\n"
    "- Focus on main conclusions, decisions, and next steps\n"
    "- Professional business language with executive tone\n"
    "- Capture the essence and business impact in minimal words\n"
    "- Prioritize actionable insights and strategic implications\n\n"
    "Transcript: {transcript}"
)

_MEDIUM_TEMPLATE = (
    "You are a professional business analyst creating presentation summaries for "
    "corporate teams and stakeholders.\n\n"
    "Analyze the following transcript and provide a MEDIUM-length summary that balances "
    "comprehensive coverage with readability. Structure your response to cover the main "
    "topics, key arguments, important decisions, and strategic implications. "
    "{language_instruction}\n\n"
    "Requirements:\n"
    "- 3-4 well-structured paragraphs (150-250 words total)\n"
    "- Cover main topics, key points, and strategic context\n"
    "- Include important details, decisions, and action items\n"
    "- Professional business writing style suitable for team sharing\n"
    "- Clear logical flow from overview to specifics to conclusions\n"
    "- Suitable for middle management and project teams\n\n"
    "Structure your response as:\n"
    "1. Opening paragraph: Main topic, purpose, and key participants\n"
    "2. Core content: Key points, arguments, and discussions\n"
    "3. Outcomes: Conclusions, decisions, and recommended next steps\n\n"
    "Transcript: {transcript}"
)

_DETAILED_TEMPLATE = (
    "You are a professional executive assistant specializing in creating comprehensive "
    "presentation summaries.\n\n"
    "Analyze the following transcript and provide a DETAILED summary covering all major "
    "points. {language_instruction}\n\n"
    "Transcript: {transcript}"
)

_SUMMARY_TEMPLATES: dict[SummaryType, str] = {
    SummaryType.short: _SHORT_TEMPLATE,
    SummaryType.medium: _MEDIUM_TEMPLATE,
    SummaryType.detailed: _DETAILED_TEMPLATE,
}


def summary_language_instruction(language: str | None) -> str:
    return SUMMARY_LANGUAGE_INSTRUCTIONS.get(
        (language or "").strip().lower(), DEFAULT_SUMMARY_LANGUAGE_INSTRUCTION
    )


def translation_language_name(
    language: str | None, default: str = DEFAULT_TRANSLATION_LANGUAGE_NAME
) -> str:
    return TRANSLATION_LANGUAGE_NAMES.get((language or "").strip().lower(), default)


def build_summary_prompt(summary_type: str | None, transcript: str, language: str = "en") -> str:
    """
    Промпт summary. Неизвестный тип -> medium, неизвестный язык -> английский.
    Транскрипт вставляется как есть, в самом конце.
    """
    template = _SUMMARY_TEMPLATES[SummaryType.resolve(summary_type)]
    # str.format не трогаем: фигурные скобки в транскрипте не должны ломать шаблон
    head, _, _ = template.partition("{transcript}")
    return head.replace(
        "{language_instruction}", summary_language_instruction(language)
    ) + transcript


def build_translation_prompt(
    text: str,
    target_language: str,
    previous_translation: str | None = None,
    *,
    default_language_name: str = DEFAULT_TRANSLATION_LANGUAGE_NAME,
) -> str:
    name = translation_language_name(target_language, default_language_name)
    if previous_translation:
        return (
            f"You are translating a live speech transcription to {name}. "
            "Translate the following new text segment to continue smoothly from the "
            "previous translation. Provide only the translation.\n\n"
            f"New text to translate: {text}\n\n"
            f"Previous translation context: {previous_translation}"
        )
    return (
        f"Translate the following English text to {name}. Provide only the translation.\n\n"
        f"Text to translate: {text}"
    )


def build_messages(prompt: str) -> list[dict[str, str]]:
    """Один user-message: так же шлём и summary, и перевод."""
    return [{"role": "user", "content": prompt}]
