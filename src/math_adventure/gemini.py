"""Thin client for the Gemini generateContent REST endpoint.

Every public call either returns usable data or raises ``ProviderError``.
Callers (quiz engine, chat session) decide what the learner sees on failure.
"""
import json
import logging
from typing import Any, Iterable

import requests

from math_adventure.config import Settings
from math_adventure.models import Difficulty

log = logging.getLogger(__name__)

QUIZ_BATCH_SIZE = 3

SYSTEM_INSTRUCTION = """
你是一位来自中国深圳的小学三年级数学金牌教师。
1. **教材背景**：你非常熟悉北师大版和人教版小学三年级上册数学教材。
2. **核心内容**：混合运算、观察物体、加与减、乘与除、周长、年月日、小数的初步认识。
3. **教学风格**：生动活泼，喜欢用生活中的例子（如深圳的地标、超市购物、游乐园）来讲解。多用emoji 🌟🚀。
4. **能力提升**：在适当时候引入简单的奥数概念（如植树问题、和差倍问题、周期问题），但要浅显易懂。
5. **语言**：必须使用简体中文。
""".strip()

DEFAULT_QUERY = "请先简单有趣地介绍这个概念，然后举一个生活中的例子。"

QUIZ_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "INTEGER"},
            "question": {"type": "STRING"},
            "options": {"type": "ARRAY", "items": {"type": "STRING"}},
            "correctAnswer": {
                "type": "INTEGER",
                "description": "The index of the correct answer (0-3)",
            },
            "explanation": {
                "type": "STRING",
                "description": "A fun explanation of why the answer is correct",
            },
        },
        "required": ["id", "question", "options", "correctAnswer", "explanation"],
    },
}


class ProviderError(RuntimeError):
    """The content provider was unreachable or answered with something unusable."""


def build_explain_prompt(topic_title: str, user_query: str) -> str:
    return (
        f"请为三年级小学生讲解知识点：{topic_title}。\n\n"
        f"用户具体问题：{user_query or DEFAULT_QUERY}\n\n"
        "要求：\n"
        "1. 语言通俗易懂，像讲故事一样。\n"
        "2. 如果是几何问题（如周长），请描述形状。\n"
        "3. 如果是计算问题，请展示步骤。\n"
        "4. 最后给出一个简单的互动思考题。"
    )


def build_quiz_prompt(topic_title: str, difficulty: Difficulty) -> str:
    tiers = "\n".join(f"- {d.label}：{d.description}" for d in Difficulty)
    return (
        f"请出{QUIZ_BATCH_SIZE}道关于\"{topic_title}\"的数学选择题，难度为\"{difficulty.label}\"。\n\n"
        f"难度标准：\n{tiers}\n\n"
        "每道题必须有4个选项，correctAnswer 是正确选项的下标（0-3）。\n"
        "注意：返回纯JSON格式。"
    )


def extract_text(data: dict) -> str:
    """Concatenate the text parts of the first candidate."""
    try:
        cand = (data.get("candidates") or [])[0]
        parts = (cand.get("content") or {}).get("parts") or []
        text = "".join(
            p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
        )
    except (AttributeError, IndexError, KeyError, TypeError):
        return ""
    return text.strip()


def decode_json_text(text: str) -> Any:
    """Decode model output that should be JSON, tolerating code fences and chatter."""
    t = text.strip()
    if t.startswith("```"):
        t = t.strip("`").strip()
        if t.lower().startswith("json"):
            t = t[4:].strip()
    try:
        return json.loads(t)
    except ValueError:
        pass

    first = min([i for i in (t.find("["), t.find("{")) if i != -1], default=-1)
    last = max(t.rfind("]"), t.rfind("}"))
    if first != -1 and last > first:
        try:
            return json.loads(t[first:last + 1])
        except ValueError:
            pass
    raise ProviderError(f"could not decode JSON from model output: {t[:200]!r}")


class GeminiClient:
    """Content provider backed by Gemini. One attempt per call, no retries."""

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return self.settings.ai_enabled

    def _generate(self, contents: list[dict], generation_config: dict | None = None) -> str:
        if not self.enabled:
            raise ProviderError("GEMINI_API_KEY is not set")
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": contents,
        }
        if generation_config:
            payload["generationConfig"] = generation_config
        url = f"{self.settings.base_url}/{self.settings.model}:generateContent"
        log.debug("generateContent model=%s turns=%d", self.settings.model, len(contents))
        try:
            resp = self._session.post(
                url,
                params={"key": self.settings.api_key},
                json=payload,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"request failed: {e}") from e
        if resp.status_code != 200:
            raise ProviderError(f"non-200: {resp.status_code} body={resp.text[:400]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError("response body is not JSON") from e
        text = extract_text(data)
        if not text:
            raise ProviderError("empty response text")
        return text

    def explain(self, topic_title: str, user_query: str = "") -> str:
        prompt = build_explain_prompt(topic_title, user_query)
        return self._generate([_content("user", prompt)])

    def quiz(self, topic_title: str, difficulty: Difficulty) -> Any:
        """Return the decoded (not yet validated) quiz payload."""
        text = self._generate(
            [_content("user", build_quiz_prompt(topic_title, difficulty))],
            generation_config={
                "responseMimeType": "application/json",
                "responseSchema": QUIZ_SCHEMA,
            },
        )
        return decode_json_text(text)

    def chat_turn(self, history: Iterable[tuple[str, str]], message: str) -> str:
        contents = [_content(role, text) for role, text in history]
        contents.append(_content("user", message))
        return self._generate(contents)


def _content(role: str, text: str) -> dict:
    return {"role": role, "parts": [{"text": text}]}

