"""
Conversation prompt template
"""

CONVERSATION_PROMPT = """Generate a short Mandarin conversation using the word "{word}".

For each turn, provide:
- Chinese (characters)
- Pinyin (phonetic transcription)
- English (translation)

Format:
A: <Chinese> | <Pinyin> | <English>
B: <Chinese> | <Pinyin> | <English>
A: <Chinese> | <Pinyin> | <English>
B: <Chinese> | <Pinyin> | <English>

Keep it conversational and natural, 3-5 turns, each turn 1-2 short sentences. Do not add any extra commentary or explanation."""


def build_conversation_prompt(word: str) -> str:
    """
    Build the generation prompt for a word

    The same word always produces the same prompt.
    """
    word = (word or "").strip()
    return CONVERSATION_PROMPT.format(word=word)
