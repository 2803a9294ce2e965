"""Repurpose content from the command line.

Drives the same ComposerState the web client uses, then prints the post
formatted for the chosen style.

Usage:
    python -m studio_core --text "Paste an article here" --style Twitter
    python -m studio_core --url https://example.com/post --tone Witty
    python -m studio_core --image slide1.png --image slide2.png --words 150

Options:
    --text / --file     Text input (inline or read from a file)
    --url               URL input, repeatable
    --image             Image input, repeatable
    --tone / --style    Tone and platform style
    --words             Approximate summary length
    --no-hashtags       Skip the hashtag call
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import logging
import mimetypes
import sys
from pathlib import Path

from openai import AsyncOpenAI
from pydantic import ValidationError

from studio_core.composer.state import ComposerState, SubmissionError
from studio_core.config.settings import get_settings
from studio_core.extraction.fetcher import UrlFetcher
from studio_core.llm.client import ContentGenerator
from studio_core.models.inputs import ImageData, InputType, Style, Tone
from studio_core.share import format_post

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("studio")


def load_image(path: Path) -> ImageData:
    mime_type, _ = mimetypes.guess_type(path.name)
    return ImageData(
        base64=base64.b64encode(path.read_bytes()).decode("ascii"),
        mime_type=mime_type or "application/octet-stream",
        name=path.name,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studio",
        description="Repurpose text, images or web pages into a social media post",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Text to analyze")
    source.add_argument("--file", type=Path, help="Read text to analyze from a file")
    source.add_argument("--url", action="append", help="URL to fetch and analyze (repeatable)")
    source.add_argument("--image", action="append", type=Path, help="Image file to analyze (repeatable)")
    parser.add_argument("--tone", choices=[t.value for t in Tone], default=Tone.PROFESSIONAL.value)
    parser.add_argument("--style", choices=[s.value for s in Style], default=Style.LINKEDIN.value)
    parser.add_argument("--words", type=int, help="Approximate summary length in words")
    parser.add_argument("--no-hashtags", action="store_true", help="Skip hashtag generation")
    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if not settings.llm_api_key:
        logger.error("LLM_API_KEY not set")
        return 1

    state = ComposerState(
        tone=Tone(args.tone),
        style=Style(args.style),
        word_count=args.words,
    )

    if args.text is not None or args.file is not None:
        state.set_input_type(InputType.TEXT)
        state.text = args.text if args.text is not None else args.file.read_text(encoding="utf-8")
    elif args.image:
        state.set_input_type(InputType.IMAGE)
        for path in args.image:
            try:
                state.add_image(load_image(path))
            except ValidationError as e:
                logger.error("Cannot use %s: %s", path, e.errors()[0]["msg"])
                return 2
    else:
        state.set_input_type(InputType.URL)
        async with UrlFetcher(
            timeout=settings.url_fetch_timeout,
            max_chars=settings.url_content_max_chars,
            max_redirects=settings.url_max_redirects,
        ) as fetcher:
            for url in args.url:
                entry = await state.add_url(url, fetcher)
                logger.info("%s → %s", url, entry.status.value)

    llm = AsyncOpenAI(api_key=settings.llm_api_key, base_url=settings.llm_base_url)
    generator = ContentGenerator(llm, settings.llm_model, settings.llm_fast_model)
    try:
        result = await state.analyze(generator, with_hashtags=not args.no_hashtags)
    except SubmissionError as e:
        logger.error("%s", e)
        return 2
    except ValidationError as e:
        logger.error("Invalid options: %s", e.errors()[0]["msg"])
        return 2
    finally:
        await generator.close()

    if result is None:
        logger.error("%s", state.error)
        return 1

    print(format_post(result, state.style))
    return 0


def main() -> None:
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
