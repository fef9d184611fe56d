from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
import logging
from typing import Optional
from google import genai
from google.genai import types

from .skills import Difficulty, GameMode, GrammarTopic

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GenerationRequest:
    kind: GameMode
    difficulty: Difficulty
    topic: Optional[GrammarTopic] = None
    excluded_texts: tuple[str, ...] = field(default_factory=tuple)

_JUMBLED_INTROS: dict[Difficulty, str] = {
    Difficulty.EASY: "Generate a very simple English sentence with 4-6 words suitable for a beginner student.",
    Difficulty.MODERATE: "Generate a moderately complex English sentence with 7-10 words suitable for an intermediate student.",
    Difficulty.HARD: "Generate a complex English sentence with 11-15 words, possibly including a subordinate clause, suitable for an advanced student.",
}

_GRAMMAR_LEVELS: dict[Difficulty, str] = {
    Difficulty.EASY: "an easy",
    Difficulty.MODERATE: "a moderately difficult",
    Difficulty.HARD: "a difficult",
}

def _history_constraint(excluded: tuple[str, ...], what: str) -> str:
    if not excluded:
        return ""
    return (
        f" To ensure variety, please do not generate {what} that is identical to any of the "
        f"following previously used sentences: [{'; '.join(excluded)}]."
    )

def build_jumbled_prompt(difficulty: Difficulty, excluded: tuple[str, ...]) -> str:
    return (
        f"{_JUMBLED_INTROS[difficulty]} Provide the sentence, a jumbled array of its words, and a "
        "helpful hint for rearranging them. The hint should guide the user on grammar or sentence "
        "structure without giving away the answer directly. Ensure the jumbled words are truly shuffled."
        + _history_constraint(excluded, "a sentence")
    )

def build_grammar_prompt(difficulty: Difficulty, topic: GrammarTopic, excluded: tuple[str, ...]) -> str:
    return f"""Generate {_GRAMMAR_LEVELS[difficulty]} English grammar challenge for a student, focusing on the topic of '{topic.label}'. The challenge must be a single sentence containing one clear grammatical error related to '{topic.label}'.
Provide the following in your response:
1. 'sentenceWithError': The full sentence with the grammatical error.
2. 'options': An array of four strings representing multiple-choice options. One of these must be the correct word/phrase to fix the error.
3. 'correctAnswer': The string that is the correct answer from the options.
4. 'justification': A brief, clear explanation for why the answer is correct, suitable for a student.{_history_constraint(excluded, "a challenge sentence")}"""

def build_prompt(request: GenerationRequest) -> str:
    if request.kind is GameMode.JUMBLED_WORDS:
        return build_jumbled_prompt(request.difficulty, request.excluded_texts)
    if request.topic is None:
        raise ValueError("grammar requests need a topic")
    return build_grammar_prompt(request.difficulty, request.topic, request.excluded_texts)

_JUMBLED_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "sentence": types.Schema(
            type=types.Type.STRING,
            description="The correct, grammatically sound English sentence.",
        ),
        "jumbledWords": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="An array of strings, where each string is a word from the sentence, in a random order.",
        ),
        "hint": types.Schema(
            type=types.Type.STRING,
            description="A constructive hint to help the user form the correct sentence.",
        ),
    },
    required=["sentence", "jumbledWords", "hint"],
)

_GRAMMAR_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "sentenceWithError": types.Schema(type=types.Type.STRING),
        "options": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        "correctAnswer": types.Schema(type=types.Type.STRING),
        "justification": types.Schema(type=types.Type.STRING),
    },
    required=["sentenceWithError", "options", "correctAnswer", "justification"],
)

RESPONSE_SCHEMAS: dict[GameMode, types.Schema] = {
    GameMode.JUMBLED_WORDS: _JUMBLED_SCHEMA,
    GameMode.GRAMMAR_CHALLENGE: _GRAMMAR_SCHEMA,
}

@dataclass
class LLMClient:
    api_key: str
    model: str = "gemini-2.5-flash"

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.api_key)

    async def generate(self, request: GenerationRequest) -> str:
        contents = build_prompt(request)
        logger.info(
            "llm_usage: generate model=%s kind=%s difficulty=%s topic=%s excluded=%s prompt_len=%s",
            self.model,
            request.kind.value,
            request.difficulty.value,
            request.topic.value if request.topic else None,
            len(request.excluded_texts),
            len(contents),
        )
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMAS[request.kind],
        )
        client = self._client()

        def _call() -> str:
            resp = client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
            return (resp.text or "").strip()

        return await asyncio.to_thread(_call)
