"""
Post-processor 모듈
모델이 지시를 어겨도 결과가 규칙을 지키도록 결정적으로 교정

태국어 출력(KR→TH) 처리 순서:
    1. 이름 치환 (깨우 → แก้ว)
    2. 한글 제거 (웃음 표기는 3단계에서 변환)
    3. 웃음 표기 정규화 (ㅋㅋ/ㅎㅎ/하하 → 555)
    4. 존댓말 어미(ครับ) 보정 (설정으로 on/off)

한국어 출력(TH→KR)은 웃음 표기 정규화와 태국 문자 제거만 적용.
"""
import logging
import re
from dataclasses import replace

from .models import Direction, TranslationRequest, TranslationResult

logger = logging.getLogger(__name__)

SOURCE_NAME = "깨우"
TARGET_NAME = "แก้ว"

# 태국 문자 뒤에 붙는 모음/성조 부호 (แกว่ง, แคว้น 같은 단어는 건드리지 않음)
THAI_MARKS = "\u0E31\u0E34-\u0E3A\u0E47-\u0E4E"

# 모델이 자주 내놓는 잘못된 표기
NAME_MISSPELLINGS = re.compile(
    r"깨우|แกอู|แก้อู|แก๊อู|แกะอู|เกะอู|แกว์"
    rf"|(?:แก๊ว|แกว|แคว)(?![{THAI_MARKS}])"
    r"|\b(?:kkaewoo|kkaeu|kaeu|kaew|kaeo)\b",
    re.IGNORECASE,
)

HANGUL = "\u1100-\u11FF\u3130-\u318F\uA960-\uA97F\uAC00-\uD7A3\uD7B0-\uD7FF"
SYLLABLES = "\uAC00-\uD7A3"
THAI = "\u0E00-\u0E7F"

# 하하는 단독으로 쓰일 때만 웃음 (축하하고 등은 아님)
KO_HAHA = rf"(?<![{SYLLABLES}])(?:하){{2,}}(?![{SYLLABLES}])"
KO_LAUGH = rf"[ㅋㅎ]+|{KO_HAHA}"
RE_KO_LAUGH = re.compile(KO_LAUGH)
RE_KO_LAUGH_IN_SOURCE = re.compile(rf"[ㅋㅎ]{{2,}}|{KO_HAHA}")
RE_HANGUL_LEAK = re.compile(rf"(?P<laugh>{KO_LAUGH})|(?:(?!{KO_LAUGH})[{HANGUL}])+")
RE_THAI_LEAK = re.compile(f"[{THAI}]+")

# 555가 숫자/금액의 일부면 웃음이 아님 (1,555원, 5.555달러, 555바트, 55555 บาท)
CURRENCY = r"(?:บาท|วอน|ดอลลาร์|เยน|원|바트|달러|엔|%)"
NOT_AFTER_NUMBER = r"(?<![\d.,A-Za-z\u0E3F\u20A9$])"
NOT_BEFORE_NUMBER = rf"(?![\d.,]?[0-9A-Za-z{SYLLABLES}]|\s*{CURRENCY})"
LAUGH_555 = rf"{NOT_AFTER_NUMBER}5{{3,}}{NOT_BEFORE_NUMBER}"

RE_555_REPEATED = re.compile(rf"{NOT_AFTER_NUMBER}5{{3,}}(?:\s+5{{3,}})+{NOT_BEFORE_NUMBER}")
RE_555_LONG = re.compile(rf"{NOT_AFTER_NUMBER}5{{5,}}{NOT_BEFORE_NUMBER}")
RE_HA_TH_REPEATED = re.compile(r"(?:ฮ่า\s*){2,}ๆ*")
RE_MAI_YAMOK = re.compile(r"ๆ{2,}")
RE_THAI_LAUGH = re.compile(rf"{LAUGH_555}|ฮ่า")
RE_THAI_LAUGH_TO_KO = re.compile(rf"{LAUGH_555}|(?:ฮ่า\s*)+ๆ*")

RE_KK_REPEATED = re.compile(r"ㅋ{3,}(?:\s+ㅋ{3,})+")
RE_KK_LONG = re.compile(r"ㅋ{5,}")
RE_HH_LONG = re.compile(r"ㅎ{5,}")

RE_SPACES = re.compile(r"[ \t]{2,}")

THAI_LAUGH_TOKEN = "555"
KO_LAUGH_TOKEN = "ㅋㅋㅋ"

POLITE_PARTICLE = "ครับ"
POLITE_ENDINGS = ("ครับ", "คับ", "ครับผม")
FEMININE_ENDINGS = ("ค่ะ", "คะ", "จ้ะ", "จ้า", "ค่า")

# 문장 끝 웃음/문장부호/이모지/공백 (ครับ은 이 앞에 붙인다)
RE_TRAILING_TAIL = re.compile(
    rf"(?:\s|[!?.,~…！？]|{LAUGH_555}|ฮ่าๆ?|[\U0001F000-\U0001FAFF\u2600-\u27BF\uFE0F\u200D])*$"
)


def _tidy(text: str) -> str:
    return RE_SPACES.sub(" ", text).strip()


def enforce_name(text: str, source_text: str) -> str:
    if SOURCE_NAME not in source_text or TARGET_NAME in text:
        return text
    fixed, count = NAME_MISSPELLINGS.subn(TARGET_NAME, text)
    if count:
        logger.debug("이름 표기 교정 %d건", count)
        return fixed
    logger.debug("번역문에 이름이 없어 앞에 추가")
    return f"{TARGET_NAME} {text}"


def strip_hangul(text: str) -> str:
    """한글 제거, 웃음 표기(ㅋㅋ 등)는 남겨둔다"""
    return _tidy(RE_HANGUL_LEAK.sub(lambda m: m.group("laugh") or " ", text))


def strip_thai(text: str) -> str:
    return _tidy(RE_THAI_LEAK.sub(" ", text))


def normalize_laughter(text: str, direction: Direction) -> str:
    """
    웃음 표기를 출력 언어 관례로 통일 (여러 번 적용해도 결과 동일)

    Args:
        text: 번역문
        direction: 번역 방향 (KR→TH면 태국어 출력)
    """
    if direction is Direction.KR_TO_TH:
        text = RE_KO_LAUGH.sub(THAI_LAUGH_TOKEN, text)
        text = RE_555_REPEATED.sub(THAI_LAUGH_TOKEN, text)
        text = RE_555_LONG.sub(THAI_LAUGH_TOKEN, text)
        text = RE_HA_TH_REPEATED.sub("ฮ่าๆ", text)
        text = RE_MAI_YAMOK.sub("ๆ", text)
    else:
        text = RE_THAI_LAUGH_TO_KO.sub(KO_LAUGH_TOKEN, text)
        text = RE_KK_REPEATED.sub(KO_LAUGH_TOKEN, text)
        text = RE_KK_LONG.sub(KO_LAUGH_TOKEN, text)
        text = RE_HH_LONG.sub("ㅎㅎㅎ", text)
    return _tidy(text)


def carry_laughter(text: str, source_text: str) -> str:
    """원문에 ㅋㅋ가 있는데 번역문에 웃음이 빠졌으면 555를 붙인다"""
    if RE_KO_LAUGH_IN_SOURCE.search(source_text) and not RE_THAI_LAUGH.search(text):
        return f"{text} {THAI_LAUGH_TOKEN}".strip()
    return text


def enforce_polite_particle(text: str) -> str:
    match = RE_TRAILING_TAIL.search(text)
    core, tail = text[:match.start()], text[match.start():]
    if not core.strip():
        return text
    if core.endswith(POLITE_ENDINGS) or core.endswith(FEMININE_ENDINGS):
        return text
    return f"{core}{POLITE_PARTICLE}{tail}"


class PostProcessor:
    """번역 후처리기"""

    def __init__(self, enforce_polite_particle: bool = True):
        """
        Args:
            enforce_polite_particle: ครับ 어미 강제 여부 (False면 모델 판단 유지)
        """
        self.enforce_polite_particle = enforce_polite_particle

    def process_thai(self, text: str, source_text: str) -> str:
        text = enforce_name(text, source_text)
        text = strip_hangul(text)
        text = normalize_laughter(text, Direction.KR_TO_TH)
        text = carry_laughter(text, source_text)
        if self.enforce_polite_particle:
            text = enforce_polite_particle(text)
        return text

    def process_korean(self, text: str) -> str:
        text = normalize_laughter(text, Direction.TH_TO_KR)
        return strip_thai(text)

    def apply(self, result: TranslationResult, request: TranslationRequest) -> TranslationResult:
        if request.direction is Direction.KR_TO_TH:
            primary = self.process_thai(result.primary_text, request.source_text)
            literal = result.literal_back_translation
            if literal:
                literal = strip_thai(literal) or None
            return TranslationResult(primary, literal)

        return replace(
            result,
            primary_text=self.process_korean(result.primary_text),
            literal_back_translation=None,
        )
