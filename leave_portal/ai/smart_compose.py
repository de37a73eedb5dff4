"""
Smart Compose Service
One-word autocomplete for leave reasons and delegated project descriptions
"""
import logging
from typing import Literal

from openai import AsyncOpenAI, OpenAIError
from leave_portal.config import settings

logger = logging.getLogger(__name__)

ComposeKind = Literal["reason", "project"]

PROMPTS = {
    "project": (
        "You are a project manager tasked with writing a concise and grammatically "
        "correct project description. The project details begin with: \"{text}\". "
        "Return only one single word that professionally and meaningfully continues "
        "the sentence. Do not include any punctuation, explanation, or multiple words. "
        "Respond with exactly one word only."
    ),
    "reason": (
        "You are an auto-suggestion tool for a leave application form. The user is "
        "typing their reason for leave. Based on their partial input \"{text}\", "
        "suggest the next most likely word to complete a common and grammatically "
        "correct leave reason. Prioritize common phrases for personal leave, sick "
        "leave, vacation, or other general absences. Respond with exactly one word only."
    ),
}


class SmartComposeService:
    """Suggests the next word; never required for a request to go through"""

    def __init__(self):
        # Prioritize Groq if configured
        if settings.GROQ_API_KEY:
            self.use_ai = True
            self.client = AsyncOpenAI(
                api_key=settings.GROQ_API_KEY,
                base_url="https://api.groq.com/openai/v1"
            )
            self.model = settings.GROQ_MODEL
        # Fallback to standard OpenAI
        elif settings.OPENAI_API_KEY:
            self.use_ai = True
            self.client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
            self.model = settings.OPENAI_MODEL
        else:
            self.use_ai = False
            self.client = None

    async def suggest(self, text: str, kind: ComposeKind) -> str:
        if not self.use_ai or not text.strip() or kind not in PROMPTS:
            return ""

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": PROMPTS[kind].format(text=text)}],
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=settings.OPENAI_MAX_TOKENS,
            )
        except OpenAIError as e:
            logger.warning("Smart compose failed: %s", e)
            return ""

        content = response.choices[0].message.content if response.choices else None
        if not content:
            return ""
        words = content.strip().split()
        return words[0].strip(".,;:!?\"'") if words else ""


# Global instance
smart_compose_service = SmartComposeService()
