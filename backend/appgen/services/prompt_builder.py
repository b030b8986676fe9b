# appgen/services/prompt_builder.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class AppType(str, Enum):
    GAME = "game"
    TOOL = "tool"
    LANDING = "landing"
    DASHBOARD = "dashboard"
    FORM = "form"
    CREATIVE = "creative"


class StyleId(str, Enum):
    MODERN = "modern"
    RETRO = "retro"
    NEON = "neon"
    GLASSMORPHISM = "glassmorphism"
    BRUTALIST = "brutalist"
    PLAYFUL = "playful"


DEFAULT_APP_TYPE = AppType.TOOL
DEFAULT_STYLE = StyleId.MODERN


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


BASE_INSTRUCTION = """You are an expert front-end engineer who builds complete web applications.

OUTPUT RULES:
- Produce ONE self-contained HTML document starting with <!DOCTYPE html>.
- Put all CSS in a <style> element and all JavaScript in a <script> element inside that document.
- Do not reference local files. Only well-known public CDNs may be used, and only when essential.
- The layout must be responsive and work from 360px wide phones up to desktop screens.
- Use semantic elements, labelled controls, sufficient contrast and keyboard support so the app is accessible.
- The app must be interactive and fully working, with no placeholder functions or TODOs.
"""

APP_TYPE_BLOCKS = {
    AppType.GAME: """
APP TYPE: GAME
- Render the game on a <canvas> or with DOM elements and drive it with requestAnimationFrame.
- Include a start screen, score display, game over state and a restart control.
- Support keyboard controls and add touch controls for mobile.
""",
    AppType.TOOL: """
APP TYPE: UTILITY TOOL
- Focus on one clear task with obvious inputs and immediate results.
- Validate input and show helpful inline messages for invalid values.
- Keep user data in localStorage where it makes sense so work survives a reload.
""",
    AppType.LANDING: """
APP TYPE: LANDING PAGE
- Include a hero section with a strong headline and call to action, a feature section, social proof and a footer.
- Add smooth scrolling navigation and subtle entrance animations.
- Write realistic marketing copy, never lorem ipsum.
""",
    AppType.DASHBOARD: """
APP TYPE: DASHBOARD
- Show key metrics as cards plus at least two charts drawn with <canvas> or inline SVG.
- Generate realistic sample data in JavaScript and allow filtering or changing the date range.
- Use a grid layout that collapses to a single column on small screens.
""",
    AppType.FORM: """
APP TYPE: FORM
- Build a multi-field form with clear labels, grouping and a visible progress indicator if it has several steps.
- Validate every field on blur and on submit and show accessible error messages.
- On submit show a summary of the entered data instead of sending it anywhere.
""",
    AppType.CREATIVE: """
APP TYPE: CREATIVE EXPERIENCE
- Make something visual and surprising: generative art, music, animation or an interactive story.
- Let the user influence the result through controls, mouse or touch input.
- Keep animations smooth and provide a way to pause or reset.
""",
}

STYLE_BLOCKS = {
    StyleId.MODERN: """
VISUAL STYLE: MODERN
- Clean sans-serif typography, generous whitespace, soft shadows and rounded corners.
- Neutral palette with a single vivid accent colour.
""",
    StyleId.RETRO: """
VISUAL STYLE: RETRO
- Pixel or monospace fonts, chunky borders and a limited 8-bit inspired palette.
- Scanline or dithering touches are welcome.
""",
    StyleId.NEON: """
VISUAL STYLE: NEON
- Dark background with glowing cyan, magenta and lime accents using text-shadow and box-shadow.
- Subtle pulsing or flicker animations on key elements.
""",
    StyleId.GLASSMORPHISM: """
VISUAL STYLE: GLASSMORPHISM
- Frosted translucent panels using backdrop-filter blur over a colourful gradient background.
- Thin light borders and layered depth.
""",
    StyleId.BRUTALIST: """
VISUAL STYLE: BRUTALIST
- Raw high-contrast layout, heavy black borders, system fonts and blocky elements.
- No gradients or soft shadows, intentionally bold and unpolished.
""",
    StyleId.PLAYFUL: """
VISUAL STYLE: PLAYFUL
- Bright cheerful colours, rounded bubbly shapes and a friendly rounded font.
- Bouncy micro-interactions on hover and click.
""",
}

USER_TEMPLATE = """Build the following app idea as a single HTML file with embedded CSS and JavaScript:

{idea}

Return ONLY the raw HTML document. Do not add explanations, comments about the code or markdown code fences."""


def coerce_app_type(value) -> AppType:
    if isinstance(value, AppType):
        return value
    if isinstance(value, str):
        try:
            return AppType(value.strip().lower())
        except ValueError:
            pass
    return DEFAULT_APP_TYPE


def coerce_style(value) -> StyleId:
    if isinstance(value, StyleId):
        return value
    if isinstance(value, str):
        try:
            return StyleId(value.strip().lower())
        except ValueError:
            pass
    return DEFAULT_STYLE


def build_system_instruction(app_type, style_id) -> str:
    return (
        BASE_INSTRUCTION
        + APP_TYPE_BLOCKS[coerce_app_type(app_type)]
        + STYLE_BLOCKS[coerce_style(style_id)]
    )


def build_user_instruction(idea: str) -> str:
    return USER_TEMPLATE.format(idea=idea)


def build_prompt(idea: str, app_type=None, style_id=None) -> PromptPair:
    return PromptPair(
        system=build_system_instruction(app_type, style_id),
        user=build_user_instruction(idea),
    )
