"""
SEO signal extraction from the rendered DOM.

Everything is collected by a single in-page evaluation; SeoExtractor then
normalizes the returned payload into SeoData.
"""

import re
from typing import Any

from .models import ImageRecord, LinkRecord, SeoData

# Runs inside the page. Missing elements fall back to '' / [] so the payload
# never carries null for a text field.
SEO_EXTRACTION_SCRIPT = """
() => {
    const text = (el) => (el ? (el.innerText || el.textContent || '') : '');
    const meta = (name) => {
        const el = document.querySelector(`meta[name="${name}"]`);
        return el ? (el.getAttribute('content') || '') : '';
    };
    return {
        title: (document.querySelector('title') || {}).textContent || '',
        description: meta('description'),
        keywords: meta('keywords'),
        h1: text(document.querySelector('h1')),
        h2: [...document.querySelectorAll('h2')].map(text),
        h3: [...document.querySelectorAll('h3')].map(text),
        images: [...document.querySelectorAll('img')].map((img) => {
            const rect = img.getBoundingClientRect();
            return {
                src: img.currentSrc || img.src || '',
                alt: img.getAttribute('alt') || '',
                width: rect.width,
                height: rect.height,
            };
        }),
        links: [...document.querySelectorAll('a')].map((link) => ({
            href: link.href || '',
            text: text(link),
        })),
    };
}
"""


class SeoExtractor:
    """
    Normalizes the raw payload returned by SEO_EXTRACTION_SCRIPT.

    Tolerates missing keys and null values so a partially broken page never
    raises during extraction.
    """

    def parse(self, payload: dict[str, Any] | None) -> SeoData:
        """
        Convert an extraction payload into SeoData.

        Args:
            payload: Dictionary returned by page.evaluate(SEO_EXTRACTION_SCRIPT)

        Returns:
            SeoData with whitespace-normalized text fields
        """
        payload = payload or {}

        return SeoData(
            title=self._text(payload.get("title")),
            description=self._text(payload.get("description")),
            keywords=self._text(payload.get("keywords")),
            h1=self._text(payload.get("h1")),
            h2=self._text_list(payload.get("h2")),
            h3=self._text_list(payload.get("h3")),
            images=self._images(payload.get("images")),
            links=self._links(payload.get("links")),
        )

    def _text(self, value: Any) -> str:
        if value is None:
            return ""
        return self._normalize_whitespace(str(value))

    def _text_list(self, values: Any) -> list[str]:
        if not values:
            return []
        return [self._text(value) for value in values]

    def _images(self, values: Any) -> list[ImageRecord]:
        images: list[ImageRecord] = []

        for item in values or []:
            if not isinstance(item, dict):
                continue
            images.append(
                ImageRecord(
                    src=str(item.get("src") or ""),
                    alt=self._text(item.get("alt")),
                    width=self._number(item.get("width")),
                    height=self._number(item.get("height")),
                )
            )

        return images

    def _links(self, values: Any) -> list[LinkRecord]:
        links: list[LinkRecord] = []

        for item in values or []:
            if not isinstance(item, dict):
                continue
            links.append(
                LinkRecord(
                    href=str(item.get("href") or ""),
                    text=self._text(item.get("text")),
                )
            )

        return links

    def _number(self, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    def _normalize_whitespace(self, text: str) -> str:
        """Collapse runs of whitespace into single spaces."""
        return re.sub(r"\s+", " ", text).strip()
