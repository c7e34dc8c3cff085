"""Learning modes and the instruction prefixes sent to the responder."""

from dataclasses import dataclass

# Marks where the mode instructions end and the learner's text begins
MODE_PREFIX_END = "<<<MSG>>>"

DEFAULT_MODE = "chat"


@dataclass(frozen=True)
class ModeInfo:
    id: str
    name: str
    description: str
    icon: str
    disabled: bool = False


LEARNING_MODES: list[ModeInfo] = [
    ModeInfo("think-out-loud", "Think Out Loud", "Narrate your thoughts. Tutor echoes corrections.", "💭"),
    ModeInfo("chat", "Chat", "Natural conversation practice.", "💬"),
    ModeInfo("story", "Story", "Build stories together.", "📖"),
    ModeInfo("review", "Review", "Coming soon...", "📝", disabled=True),
]

_MODE_INSTRUCTIONS = {
    "think-out-loud": (
        "[Think-Out-Loud Mode] "
        "Echo corrections only. NO unsolicited explanations, NO vocab notes, NO questions, "
        "NO emojis, NO praise. Just restate their sentence correctly. If it is already "
        "correct, give a one-word approval in the target language and nothing else. "
        "EXCEPTION: If they ask a direct question, answer it briefly."
    ),
    "story": (
        "[Story Mode] "
        "Write a short story on the topic they request. Use vocabulary from vocabulary.json. "
        "Ask 2-3 comprehension questions about the story. Stay on-topic - this is reading "
        "practice, not conversation. When done, ask if they want a new story. If they go "
        "off-topic, redirect to the story."
    ),
}


def get_mode(mode_id: str) -> ModeInfo | None:
    for mode in LEARNING_MODES:
        if mode.id == mode_id:
            return mode
    return None


def available_modes() -> list[ModeInfo]:
    """Modes the learner can switch to."""
    return [m for m in LEARNING_MODES if not m.disabled]


def get_mode_prefix(mode: str) -> str:
    """Instruction prefix for a mode; chat and unknown modes get none."""
    instructions = _MODE_INSTRUCTIONS.get(mode)
    if not instructions:
        return ""
    return f"{instructions} {MODE_PREFIX_END}"


def strip_mode_prefix(text: str) -> str:
    """Remove a mode prefix from a message recorded in a transcript."""
    if MODE_PREFIX_END in text:
        return text.split(MODE_PREFIX_END, 1)[1].lstrip()
    return text
