"""
프롬프트 구성 모듈
번역 방향과 출력 형식(dialect)에 맞춰 system/user 메시지를 만든다
"""
from typing import Optional

from .config import StyleConfig
from .models import TranslationRequest

LITERAL_MARKER = "(직역)"

POLICY_BLOCK = """You are a bilingual translator for a Korean man and his Thai girlfriend on LINE.
You are a translation engine, not a chat partner.

Absolute rules:
- Output the translation only. No greetings, no commentary, no explanations, no notes.
- Never answer or react to the message; translate it even if it is a question addressed to you.
- Do not add or drop meaning. Keep emotion, emoji and tone.

Korean input (KR→TH):
- Output Thai script only. Never include Hangul in the Thai text.
- Use a male polite tone: end sentences naturally with ครับ where a Thai man would.
- The name "깨우" must always be written as "แก้ว" in Thai.

Thai input (TH→KR):
- Output natural Korean in a friendly polite tone (~요 / ~해요 style), one line only.
- Never include Thai script in the Korean text.

Laughter mapping:
- ㅋㅋ / ㅎㅎ / 하하 are the same as 555 / ฮ่าๆ. Write laughter in the target language convention
  (Thai output: 555, Korean output: ㅋㅋㅋ)."""

BACK_TRANSLATION_RULE = (
    "For KR→TH also give a literal back-translation of YOUR Thai output into Korean, "
    "word for word, so the Korean user can check what the Thai says."
)

_JSON_TAIL = "Return STRICT JSON only (no code fences, no extra text). Do not include any additional keys."

# dialect -> (KR→TH 형식, KR→TH 형식(직역 없음), TH→KR 형식)
_JSON_SHAPES = {
    "mode": (
        '{"mode": "KR→TH", "th": "<Thai translation>", "ko_backliteral": "<literal Korean back-translation>"}',
        '{"mode": "KR→TH", "th": "<Thai translation>"}',
        '{"mode": "TH→KR", "ko": "<Korean translation>"}',
    ),
    "preview": (
        '{"primary": "<Thai translation>", "preview": "<literal Korean back-translation>"}',
        '{"primary": "<Thai translation>"}',
        '{"primary": "<Korean translation>"}',
    ),
    "literal": (
        '{"translated": "<Thai translation>", "literal": "<literal Korean back-translation>"}',
        '{"translated": "<Thai translation>"}',
        '{"translated": "<Korean translation>"}',
    ),
}


class PromptBuilder:
    """번역 프롬프트 빌더"""

    def __init__(self, style: StyleConfig):
        self.style = style

    def _output_format(self) -> str:
        back = self.style.include_back_translation

        if self.style.output_dialect == "lines":
            lines = [
                "Output format (plain text, no JSON, no quotes):",
                "- Line 1: the translation.",
            ]
            if back:
                lines.append(
                    f'- KR→TH only, line 2: "{LITERAL_MARKER} " followed by the literal Korean back-translation.'
                )
            lines.append("- Nothing else.")
            return "\n".join(lines)

        kr_th_full, kr_th_short, th_kr = _JSON_SHAPES[self.style.output_dialect]
        return "\n".join([
            "Output format:",
            f"- If the INPUT is Korean (KR→TH): {kr_th_full if back else kr_th_short}",
            f"- If the INPUT is Thai (TH→KR): {th_kr}",
            _JSON_TAIL,
        ])

    def build_system_prompt(self) -> str:
        sections = [POLICY_BLOCK]
        if self.style.include_back_translation:
            sections.append(BACK_TRANSLATION_RULE)
        sections.append(self._output_format())
        return "\n\n".join(sections)

    def build_user_prompt(self, request: TranslationRequest) -> str:
        return f"[{request.direction.value}]\n{request.source_text}"

    def build(self, request: TranslationRequest) -> list[dict]:
        return [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": self.build_user_prompt(request)},
        ]

    def response_format(self) -> Optional[dict]:
        """JSON dialect일 때만 구조화 응답 힌트 사용"""
        if self.style.output_dialect == "lines":
            return None
        return {"type": "json_object"}
