"""Command-line entry point.

Usage:
    imageedit -p PROMPT -i IMAGE [-b BACKGROUND] [-s SIZE] [-v]

The prompt may be literal text or a path to a prompt file. When a background
image is given both images are sent, background first, so the model can
composite the foreground onto it. The output is written next to the foreground
image with "_generated" inserted before the extension.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from imageedit.models.errors import ImageEditError
from imageedit.models.requests import DEFAULT_SIZE, ImageEditRequest
from imageedit.services.image_edit_service import ImageEditService
from imageedit.utils.path_utils import derive_output_path, load_prompt

logger = logging.getLogger(__name__)

USAGE = "Usage: imageedit -p PROMPT -i IMAGE [-b BACKGROUND] [-s SIZE]"

REQUIRED_ENV_VARS = ("AZURE_OPENAI_RESOURCE", "AZURE_OPENAI_DEPLOYMENT", "AZURE_OPENAI_API_VERSION")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imageedit",
        description="Generate or edit an image with the Azure OpenAI image edits endpoint",
    )
    parser.add_argument("-p", "--prompt", default="", help="Prompt text, or path to a prompt file (required)")
    parser.add_argument("-i", "--image", default="", help="Foreground input image file (required)")
    parser.add_argument("-b", "--background", default="", help="Background image file (optional)")
    parser.add_argument("-s", "--size", default=DEFAULT_SIZE, help=f"Image size (default: {DEFAULT_SIZE})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _fail(message: str) -> int:
    print(f"❌ {message}", file=sys.stderr)
    return 1


def _load_env() -> None:
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        # Variables may be set directly in the environment
        print("No .env file found")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _load_env()

    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        return _fail(f"Error: Environment variables {', '.join(REQUIRED_ENV_VARS)} must be set (missing: {', '.join(missing)})")

    if not args.prompt:
        return _fail(f"Error: Prompt is required (-p)\n{USAGE}")

    try:
        prompt, prompt_file = load_prompt(args.prompt)
    except (OSError, UnicodeDecodeError) as e:
        return _fail(f"Error reading prompt file: {e}")
    if prompt_file is not None:
        print(f"Loaded prompt from file: {prompt_file.name}")

    if not args.image:
        return _fail(f"Error: Input image is required (-i)\n{USAGE}")
    if not Path(args.image).exists():
        return _fail(f"Error: Input image not found: {args.image}")
    if args.background and not Path(args.background).exists():
        return _fail(f"Error: Background image not found: {args.background}")

    image_paths = [args.background, args.image] if args.background else [args.image]

    try:
        request = ImageEditRequest(image_paths=image_paths, prompt=prompt, size=args.size)
    except ValidationError as e:
        details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        return _fail(f"Error: Invalid arguments: {details}")

    output_path = derive_output_path(args.image)

    print("Generating image with Azure OpenAI...")
    print(f"Prompt:  {request.prompt}")
    if args.background:
        print(f"Background: {args.background}")
    print(f"Foreground: {args.image}")
    print(f"Output:  {output_path}")
    print(f"Size:    {request.size}\n")

    try:
        service = ImageEditService()
    except ValueError as e:
        return _fail(f"Error: {e}")

    print(f"Using image edits endpoint (api-version: {service.api_version})...")

    try:
        result = asyncio.run(service.edit(request, output_path))
    except ImageEditError as e:
        logger.debug(f"[cli] {e.error_code.value}", exc_info=e.original_exception)
        return _fail(e.message)

    print("✅ Image edit successful")
    print(f"Image saved to {result.output_path}")
    print(f"Size: {result.metrics.size_mb:.2f} MB")
    return 0


if __name__ == "__main__":
    sys.exit(main())
