"""Summarisation helpers backed by an OpenAI-compatible chat completion API."""

from __future__ import annotations

import logging
import os

from openai import OpenAI, OpenAIError

from summarysheet.config import SummarizerConfig
from summarysheet.errors import SummarizerError
from summarysheet.models import RefineOption
from summarysheet.services.retry import call_with_single_retry

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an assistant that summarizes news articles into concise, neutral bullet points."

BULLET_FORMAT = (
    'Return the summary as plain text with each bullet point starting with "- " '
    "and separated by newlines."
)

SUMMARY_PROMPT = (
    "Summarize the following article text in a concise manner. Provide the summary as 3-5 "
    "bullet points in a neutral tone. Focus on the main ideas and key details, avoiding any "
    f"opinion or embellishment. {BULLET_FORMAT}"
)

_clients: dict[tuple[str | None, str], OpenAI] = {}


def _get_client(config: SummarizerConfig) -> OpenAI:
    """Return a cached client for the endpoint described by ``config``."""

    api_key = os.environ.get(config.api_key_env)
    if not api_key:
        raise SummarizerError(
            f"{config.api_key_env} is not set. Add it to the environment or to the project .env file."
        )

    key = (config.base_url, api_key)
    client = _clients.get(key)
    if client is None:
        client = OpenAI(api_key=api_key, base_url=config.base_url, timeout=config.timeout)
        _clients[key] = client
    return client


def build_refine_prompt(option: RefineOption | str, original_text: str, current_summary: str) -> str:
    """Return the instruction used to rework ``current_summary``."""

    option = RefineOption(option)
    if option is RefineOption.SHORTER:
        return (
            "Take the following summary and make it shorter by approximately 30%, keeping it concise "
            f"and neutral. Ensure at least 1 bullet point remains. {BULLET_FORMAT}\n\n"
            f"Current summary:\n{current_summary}"
        )
    if option is RefineOption.LONGER:
        return (
            "Take the following article text and current summary, and expand the summary by "
            "approximately 30% in a neutral tone. Limit to a maximum of 10 bullet points. "
            f"{BULLET_FORMAT}\n\nArticle text:\n{original_text}\n\nCurrent summary:\n{current_summary}"
        )
    return (
        "Rewrite the following summary in a neutral tone, keeping the same length and key points. "
        f"{BULLET_FORMAT}\n\nCurrent summary:\n{current_summary}"
    )


def generate_summary(text: str, instruction: str = SUMMARY_PROMPT, config: SummarizerConfig | None = None) -> str:
    """Send ``instruction`` and ``text`` to the model and return its reply."""

    config = config or SummarizerConfig()
    content = f"{instruction}\n\n{text[: config.max_input_chars]}" if text else instruction

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]

    client = _get_client(config)
    response = client.chat.completions.create(
        model=config.model,
        messages=messages,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )

    summary = (response.choices[0].message.content or "").strip()
    if not summary:
        raise SummarizerError("The language model returned an empty summary.")
    return summary


def _generate_with_retry(text: str, instruction: str, config: SummarizerConfig | None, description: str) -> str:
    try:
        return call_with_single_retry(
            generate_summary,
            text,
            instruction,
            config,
            description=description,
            retry_on=(OpenAIError, SummarizerError),
        )
    except (OpenAIError, SummarizerError) as exc:
        logger.error("%s failed after retry: %s", description.capitalize(), exc)
        raise SummarizerError(f"Failed to {description} after retry.") from exc


def summarize_article(text: str, config: SummarizerConfig | None = None) -> str:
    """Summarise article ``text`` into 3-5 bullet points."""

    if not text or not text.strip():
        raise SummarizerError("Article text is empty. Cannot generate summary.")

    logger.info("Summarizing article text (%d characters)", len(text))
    return _generate_with_retry(text, SUMMARY_PROMPT, config, "generate summary")


def refine_summary(
    option: RefineOption | str,
    original_text: str,
    current_summary: str,
    config: SummarizerConfig | None = None,
) -> str:
    """Rework ``current_summary`` according to ``option``."""

    if not current_summary or not original_text:
        raise SummarizerError("Missing required parameters: originalText or currentSummary.")

    prompt = build_refine_prompt(option, original_text, current_summary)
    return _generate_with_retry("", prompt, config, "refine summary")


__all__ = [
    "SUMMARY_PROMPT",
    "build_refine_prompt",
    "generate_summary",
    "refine_summary",
    "summarize_article",
]
