from ythelper.models.analysis import MAX_TAGS, MAX_THUMBNAILS, MAX_TITLES

NO_CONTEXT = "None provided."

PROMPT_TEMPLATE = """\
You are a YouTube growth strategist. Analyze the video content and return a JSON object with:
- titles: {titles} high-CTR YouTube title suggestions.
- description: an SEO-optimized description with timestamps (use mm:ss format and realistic chapter labels).
- tags: {tags} relevant tags, lower case, no hashtags.
- thumbnails: {thumbnails} detailed thumbnail concept descriptions (text only, no image generation).

Additional context from creator: {context}

Return only valid JSON with keys: titles, description, tags, thumbnails."""


def build_prompt(context: str = "") -> str:
    """Render the instruction sent alongside the video and creator images."""
    return PROMPT_TEMPLATE.format(
        titles=MAX_TITLES,
        tags=MAX_TAGS,
        thumbnails=MAX_THUMBNAILS,
        context=context.strip() or NO_CONTEXT,
    )
