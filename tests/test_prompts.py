"""
PromptBuilder 테스트
"""
import json
import re

from translator_bot.config import StyleConfig
from translator_bot.models import Direction, TranslationRequest
from translator_bot.prompts import PromptBuilder


def build(style, text="오늘 저녁에 뭐 먹을래?", direction=Direction.KR_TO_TH):
    return PromptBuilder(style).build(TranslationRequest(text, direction))


class TestPromptBuilder:

    def test_message_roles(self):
        messages = build(StyleConfig())

        assert [m["role"] for m in messages] == ["system", "user"]

    def test_policy_rules_present(self):
        system = PromptBuilder(StyleConfig()).build_system_prompt()

        assert "translation only" in system
        assert "ครับ" in system
        assert '"깨우"' in system and '"แก้ว"' in system
        assert "~요" in system
        assert "555" in system and "ㅋㅋ" in system

    def test_user_prompt_carries_direction_and_text(self):
        messages = build(StyleConfig(), "กินข้าวหรือยังครับ", Direction.TH_TO_KR)

        assert messages[1]["content"] == "[TH→KR]\nกินข้าวหรือยังครับ"

    def test_system_prompt_is_direction_agnostic(self):
        style = StyleConfig()
        kr = build(style)[0]["content"]
        th = build(style, "กินข้าวหรือยังครับ", Direction.TH_TO_KR)[0]["content"]

        assert kr == th

    def test_deterministic(self):
        style = StyleConfig()

        assert build(style) == build(style)

    def test_mode_dialect_shapes(self):
        system = PromptBuilder(StyleConfig(output_dialect="mode")).build_system_prompt()

        assert '"ko_backliteral"' in system
        assert '"mode": "TH→KR"' in system
        assert "JSON" in system

    def test_json_shapes_are_valid_json(self):
        """프롬프트에 넣는 예시 형식 자체가 올바른 JSON이어야 함"""
        for dialect in ("mode", "preview", "literal"):
            system = PromptBuilder(StyleConfig(output_dialect=dialect)).build_system_prompt()
            for shape in re.findall(r"\{.*\}", system):
                assert isinstance(json.loads(shape), dict)

    def test_back_translation_disabled(self):
        system = PromptBuilder(
            StyleConfig(include_back_translation=False)
        ).build_system_prompt()

        assert "ko_backliteral" not in system
        assert "back-translation" not in system

    def test_lines_dialect(self):
        builder = PromptBuilder(StyleConfig(output_dialect="lines"))
        system = builder.build_system_prompt()

        assert "(직역)" in system
        assert "no JSON" in system
        assert builder.response_format() is None

    def test_json_response_format(self):
        assert PromptBuilder(StyleConfig()).response_format() == {"type": "json_object"}
