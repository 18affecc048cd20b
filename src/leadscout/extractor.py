"""
LeadScout extractor - turns fetched HTML into text, links, title and description.

Never raises: anything the parser chokes on degrades to the raw HTML prefix.
"""

from bs4 import BeautifulSoup

from .models import ExtractedContent

MAX_TEXT_CHARS = 10_000


def _collapse(text: str) -> str:
    return " ".join(text.split())


def extract_content(html: str) -> ExtractedContent:
    """Parse a page into visible text (capped), raw hrefs, title and meta description."""
    try:
        soup = BeautifulSoup(html, "lxml")

        # Remove script and style elements
        for element in soup(["script", "style", "noscript", "template"]):
            element.decompose()

        title = _collapse(soup.title.get_text()) if soup.title else ""

        meta = soup.find("meta", attrs={"name": "description"})
        meta_description = ""
        if meta is not None:
            meta_description = _collapse(str(meta.get("content") or ""))

        links = [str(a.get("href")) for a in soup.find_all("a", href=True) if a.get("href")]

        root = soup.body or soup
        text = _collapse(root.get_text(separator=" "))[:MAX_TEXT_CHARS]

        return ExtractedContent(
            text=text,
            links=links,
            title=title,
            meta_description=meta_description,
        )
    except Exception:
        return ExtractedContent(text=html[:MAX_TEXT_CHARS])
