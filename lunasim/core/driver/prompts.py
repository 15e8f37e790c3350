# lunasim/core/driver/prompts.py

import random
from typing import Dict, List, Optional, Tuple

from ..allen.state_models import Approach

FRIENDLY_PROMPTS = [
    "Share tales of Earth.",
    "Offer a glowing moon rock.",
    "Admire the moon's landscape together.",
    "Show a picture from your travels.",
]
AGGRESSIVE_PROMPTS = [
    "Challenge Allen's knowledge of the moon.",
    "Mock Allen for being stuck on this moon.",
    "Ignore Allen when he tries to communicate.",
    "Make a loud noise to startle Allen.",
]
CONFUSED_PROMPTS = [
    "Speak in a language Allen doesn't understand.",
    "Give Allen an object he's never seen before.",
    "Ask Allen a complex question about human culture.",
    "Explain something using a lot of technical jargon.",
]
SAD_PROMPTS = [
    "Tell Allen about the destruction of a beautiful part of Earth.",
    "Share a personal story of loss and grief.",
    "Describe the feeling of missing a loved one.",
    "Recall a sad moment from your own past.",
]
FEARFUL_PROMPTS = [
    "Suddenly approach Allen from behind.",
    "Show Allen a weapon, even if you don't intend to use it.",
    "Describe a dangerous predator from Earth in vivid detail.",
    "Recount a story of a close encounter with danger.",
]
NEUTRAL_PROMPTS = [
    "You kick moondust lightly, watching it float away in the low gravity.",
    "You silently observe Allen, focusing on his expression as he looks out into the void.",
    "You take a moment to gaze at the vast sea of stars, lost in the cosmic spectacle.",
    "You trace the outline of a distant planet with your finger, pondering its mysteries.",
]

# 菜单编号 -> (接近方式, 提示文本表, 标签)。攻击性选项在菜单里显示为 "angry"
MENU_OPTIONS: Dict[int, Tuple[Approach, List[str], str]] = {
    1: (Approach.FRIENDLY, FRIENDLY_PROMPTS, "friendly"),
    2: (Approach.AGGRESSIVE, AGGRESSIVE_PROMPTS, "angry"),
    3: (Approach.CONFUSED, CONFUSED_PROMPTS, "confused"),
    4: (Approach.SAD, SAD_PROMPTS, "sad"),
    5: (Approach.FEARFUL, FEARFUL_PROMPTS, "fearful"),
    6: (Approach.NEUTRAL, NEUTRAL_PROMPTS, "neutral"),
}
CHOICE_TO_APPROACH: Dict[int, Approach] = {choice: option[0] for choice, option in MENU_OPTIONS.items()}
LEAVE_CHOICE = 7

DIVIDER = "+" + "=" * 166 + "+"
INTRO_LINE = "\nYou encounter Allen on the alien moon. What do you do?"
LEAVE_OPTION_LINE = f"{LEAVE_CHOICE}: Leave Allen in peace and move away."
CHOICE_PROMPT = f"Choose an option (1-{LEAVE_CHOICE}): "
INVALID_CHOICE_LINE = "Invalid choice. Try again."
LEAVE_LINE = "You decide to leave Allen in peace and continue your exploration of the alien moon."


def build_menu(rng: random.Random) -> List[str]:
    """每个类别随机挑一条提示，加上离开选项"""
    lines = []
    for choice, (_, prompts, label) in MENU_OPTIONS.items():
        lines.append(f"{choice}: {rng.choice(prompts)} ({label})")
    lines.append(LEAVE_OPTION_LINE)
    return lines


def parse_choice(raw: str) -> Optional[int]:
    """解析玩家输入，合法时返回 1-7，否则返回 None"""
    try:
        choice = int(raw.strip())
    except (ValueError, AttributeError):
        return None
    if choice == LEAVE_CHOICE or choice in CHOICE_TO_APPROACH:
        return choice
    return None
