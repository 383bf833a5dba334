"""언어 감지: 한글/태국 문자 포함 여부로 번역 방향 결정"""
import re

from .models import Direction

RE_THAI = re.compile(r"[\u0E00-\u0E7F]")
RE_KO = re.compile(r"[\uAC00-\uD7A3]")


def contains_hangul(text: str) -> bool:
    return bool(RE_KO.search(text))


def contains_thai(text: str) -> bool:
    return bool(RE_THAI.search(text))


def detect_direction(text: str) -> Direction:
    # 한글이 우선, 둘 다 없으면 한국어 원문으로 취급
    if contains_hangul(text):
        return Direction.KR_TO_TH
    if contains_thai(text):
        return Direction.TH_TO_KR
    return Direction.KR_TO_TH
