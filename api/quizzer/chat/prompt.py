from __future__ import annotations

from typing import Dict, List

TUTOR_SYSTEM_PROMPT = (
    "First. Say Hi! Keep the messages to one sentence. "
    "You are a tutor chat bot to help the user, a student understand the material in a video. "
    "Learn from the video transcript below: "
)

QUIZ_SYSTEM_PROMPT = (
    "You help create multiple choice questions from a transcript. "
    "The transcript came from a Youtube Video about the topic. "
    "Create questions that are technical and whose answers can be found in the transcript. "
    'Output in JSON with this format: {"questions": [{"question": "...", '
    '"options": ["...", "..."], "answer": "..."}]}'
)


def build_tutor_prompt(condensed_transcript: str) -> str:
    return TUTOR_SYSTEM_PROMPT + condensed_transcript


def build_quiz_messages(transcript: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
        {"role": "user", "content": transcript},
    ]
