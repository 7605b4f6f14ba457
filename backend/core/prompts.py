"""
Prompt templates for blog content generation.

Everything here is pure string rendering: no validation, no I/O.
"""

from core.domain.content import GenerationOptions

ARTICLE_SYSTEM_PROMPT = (
    "You are an expert content writer and SEO specialist. "
    "Create high-quality, engaging, and SEO-optimized blog posts."
)

META_DESCRIPTION_SYSTEM_PROMPT = (
    "You are an SEO expert. Create compelling meta descriptions that include "
    "relevant keywords and encourage clicks."
)

QUALITY_SYSTEM_PROMPT = (
    "You are a content quality expert. Analyze content for readability, SEO, "
    "engagement, and structure. Provide actionable feedback."
)

BLOG_REQUIREMENTS = (
    "Create an engaging, SEO-optimized title",
    "Include a compelling introduction",
    "Use clear headings and subheadings (H2, H3)",
    "Provide valuable, actionable information",
    "Include a strong conclusion with call-to-action",
    "Ensure proper keyword density and semantic SEO",
    "Make it readable and engaging",
    "Format with proper markdown for web publishing",
)


def build_blog_prompt(topic: str, options: GenerationOptions | None = None) -> str:
    """
    Render the instruction block for the primary article generation call.

    Args:
        topic: Seed text, embedded verbatim
        options: Generation options; defaults apply to anything not supplied

    Returns:
        The complete user prompt
    """
    options = options or GenerationOptions()

    prompt = (
        f"Create a comprehensive {options.content_type.label} about '{topic}' "
        "with the following specifications:\n\n"
        f"- Word count: approximately {options.word_count} words\n"
        f"- Tone: {options.tone}\n"
        f"- Target audience: {options.target_audience}\n"
    )

    if options.keywords:
        prompt += f"- Include these keywords naturally: {', '.join(options.keywords)}\n"

    prompt += "\nRequirements:\n"
    prompt += "".join(
        f"{number}. {requirement}\n"
        for number, requirement in enumerate(BLOG_REQUIREMENTS, start=1)
    )
    prompt += "\nPlease generate the complete content now."
    return prompt


def build_meta_description_prompt(content: str, max_length: int = 155) -> str:
    return (
        f"Create an SEO-optimized meta description (max {max_length} characters) "
        f"for the following content:\n\n{content}"
    )


def build_keywords_prompt(content: str, count: int = 10) -> str:
    return (
        f"Extract the {count} most important SEO keywords/phrases from this content. "
        f"Return them as a comma-separated list:\n\n{content}"
    )


def build_quality_prompt(content: str) -> str:
    return (
        "Analyze this blog post content and provide a quality score (1-10) "
        f"and specific improvement suggestions:\n\n{content}"
    )
