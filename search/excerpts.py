import markdown

from django.utils.html import strip_tags
from django.utils.text import Truncator

EXCERPT_LENGTH = 200


def summarize_markdown(content: str, length: int = EXCERPT_LENGTH) -> str:
    if not content:
        return ""
    md = markdown.Markdown(extensions=["fenced_code"])
    html = md.convert(content)
    text = strip_tags(html).strip()
    return Truncator(text).chars(length, truncate="...")


def with_excerpts(results) -> list[dict]:
    return [
        {
            "title": result.title,
            "url": result.url,
            "published_on": result.published_on,
            "excerpt": summarize_markdown(result.content),
        }
        for result in results
    ]
