"""
Conversation Response Parser

Turns raw model output into ConversationTurn objects:
1. Strict pattern  "A: <chinese> | <pinyin> | <english>"
2. Loose pattern   "A: <chinese>"
3. Anything else is dropped (and counted)

Fewer than MIN_TURNS parsed turns -> the fixed fallback dialogue is used.
More than MAX_TURNS -> only the first MAX_TURNS are kept.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from app.schemas.conversation import MAX_TURNS, MIN_TURNS, ConversationTurn

# Full-width colon is common in Chinese model output
_STRICT_PATTERN = re.compile(r"^(A|B)\s*[:：]\s*(.+?)\s*\|\s*(.*?)\s*\|\s*(.*?)\s*$")
_LOOSE_PATTERN = re.compile(r"^(A|B)\s*[:：]\s*(.+?)\s*$")

FALLBACK_TURNS = (
    ("A", "你好，今天天气真好。", "Nǐ hǎo, jīntiān tiānqì zhēn hǎo.", "Hello, the weather is really nice today."),
    ("B", "是的，我们去公园走走吧。", "Shì de, wǒmen qù gōngyuán zǒuzou ba.", "Yes, let's go for a walk in the park."),
    ("A", "好主意，我们现在就走。", "Hǎo zhǔyì, wǒmen xiànzài jiù zǒu.", "Good idea, let's go now."),
)


def fallback_turns() -> List[ConversationTurn]:
    """Fresh copies of the canonical fallback dialogue"""
    return [
        ConversationTurn(speaker=speaker, chinese=chinese, pinyin=pinyin, english=english)
        for speaker, chinese, pinyin, english in FALLBACK_TURNS
    ]


@dataclass
class ParseOutcome:
    """Result of parsing one model response"""
    turns: List[ConversationTurn] = field(default_factory=list)
    dropped_line_count: int = 0  # non-blank lines matching neither pattern
    used_fallback: bool = False
    truncated_count: int = 0  # parsed turns cut off beyond MAX_TURNS


def parse_line(line: str) -> Optional[ConversationTurn]:
    """Parse a single line, or return None if it matches neither pattern"""
    line = line.strip()
    match = _STRICT_PATTERN.match(line)
    if match:
        speaker, chinese, pinyin, english = match.groups()
        return ConversationTurn(speaker=speaker, chinese=chinese, pinyin=pinyin, english=english)
    match = _LOOSE_PATTERN.match(line)
    if match:
        speaker, chinese = match.groups()
        return ConversationTurn(speaker=speaker, chinese=chinese)
    return None


def parse_conversation_text(raw_text: str) -> ParseOutcome:
    """
    Parse raw generator output into 3-5 turns

    Never raises on malformed input; the worst case is the fallback dialogue.
    """
    outcome = ParseOutcome()
    parsed: List[ConversationTurn] = []

    for line in (raw_text or "").splitlines():
        if not line.strip():
            continue
        turn = parse_line(line)
        if turn is None:
            outcome.dropped_line_count += 1
        else:
            parsed.append(turn)

    if len(parsed) < MIN_TURNS:
        outcome.turns = fallback_turns()
        outcome.used_fallback = True
        return outcome

    outcome.truncated_count = max(0, len(parsed) - MAX_TURNS)
    outcome.turns = parsed[:MAX_TURNS]
    return outcome
