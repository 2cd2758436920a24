"""Build the instruction sent to the model for one transformation."""

from __future__ import annotations

from dataclasses import dataclass

from transformer.templates import Template


# Tailwind vocabulary the model may use; matches the classes produced by the DOCX style map.
STYLING_VOCABULARY = {
    "font sizes": "text-xs, text-sm, text-base, text-lg, text-xl, text-2xl, text-3xl",
    "font weights": "font-normal, font-semibold, font-bold",
    "text styling": "italic, underline, font-mono, leading-relaxed",
    "spacing": "mb-2, mb-3, mb-4, mt-6, my-6, p-3, p-4, pl-4, pl-6, px-3, py-2, space-y-4",
    "text colors": "text-gray-600, text-gray-700, text-gray-800, text-gray-900, text-blue-600",
    "backgrounds and borders": "bg-white, bg-gray-50, bg-gray-100, border, border-b, border-l-4, border-gray-300, rounded-md",
}

SEMANTIC_TAGS = "h1, h2, h3, p, blockquote, pre, strong, em, a, ul, ol, li, table, tr, th, td"


@dataclass(frozen=True)
class TransformRequest:
    template_text: str
    user_input: str
    template_markup: str | None = None


def build_request(template: Template, user_input: str) -> TransformRequest:
    return TransformRequest(
        template_text=template.content,
        user_input=user_input,
        template_markup=template.styled_markup or None,
    )


def _vocabulary_lines() -> str:
    return "\n".join(f"- Use Tailwind classes for {what} ({classes})" for what, classes in STYLING_VOCABULARY.items())


def _styled_prompt(req: TransformRequest) -> str:
    return f"""You are a text transformation assistant. Transform the user's input so it follows the template's style, structure, format and VISUAL FORMATTING (font scale, weight, spacing, color).

CRITICAL: Return the transformed text as HTML that preserves the template's formatting using Tailwind CSS utility classes:
{_vocabulary_lines()}
- Use the same semantic HTML tags as the template ({SEMANTIC_TAGS}) for the same kinds of content
- DO NOT use inline styles (no style attributes)
- Return ONLY the transformed HTML: no explanations, no commentary, no markdown code fences

Use the formatted template as the formatting reference and the plain template text as the structural reference.

Template (with formatting):
{req.template_markup}

Plain template text:
{req.template_text}

User Input:
{req.user_input}

Transform the user input to match the template's style and formatting. Return only the styled HTML."""


def _plain_prompt(req: TransformRequest) -> str:
    return f"""You are a text transformation assistant. You will receive a template and user input. Transform the user's input according to the template's style, structure and format. Keep the essence of the user's input while adapting it to the template's tone, paragraph structure and spacing.

Return plain prose only: no HTML, no markdown, no explanations.

Template:
{req.template_text}

User Input:
{req.user_input}"""


def build_prompt_from_request(req: TransformRequest) -> str:
    if req.template_markup:
        return _styled_prompt(req)
    return _plain_prompt(req)


def build_prompt(template: Template, user_input: str) -> str:
    """Prompt for transforming user_input into the template's style. Pure; input must be non-empty."""
    return build_prompt_from_request(build_request(template, user_input))
