"""
Command-line entry point: ``jeeves <prompt words...>``.
"""
import sys
import logging

from jeeves.client import complete
from jeeves.config import load_settings
from jeeves.errors import JeevesError, UsageError

logger = logging.getLogger(__name__)

USAGE = """
Usage: jeeves <prompt>

Environment variables:
OPENAI_API_KEY          your OpenAI API key (mandatory)
JEEVES_OPENAI_MODEL     specify the model to use, default is "gpt-4o-mini" (optional)
JEEVES_LOG_LEVEL        sets log level, default is "info" (optional)
JEEVES_OPENAI_API_URL   override the chat completions endpoint (optional)
JEEVES_TIMEOUT          request timeout in seconds, default is none (optional)
"""


def build_prompt(args):
    """Join the command-line words into a single prompt."""
    if not args:
        raise UsageError(USAGE)
    return " ".join(args)


def present(content, stream=None):
    stream = stream or sys.stdout
    stream.write(f"\n{content}\n\n")
    stream.flush()


def setup_logging(log_level):
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # Langfuse warns on every run when tracing is not configured
    logging.getLogger("langfuse").setLevel(
        logging.DEBUG if level <= logging.DEBUG else logging.ERROR
    )


def printable(text):
    """``text`` with unencodable characters (e.g. undecodable argv bytes) replaced."""
    return text.encode("utf-8", errors="replace").decode("utf-8")


def run(args):
    prompt = build_prompt(args)
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.debug(f"OPENAI_API_KEY found with length: {len(settings.api_key)}")

    # Debug output goes to stdout alongside the reply
    if settings.debug:
        print("Using model:", settings.model)
        print("User prompt:", printable(prompt))

    content = complete(settings, prompt)
    present(content)


def main(argv=None):
    """Run jeeves and return the process exit code."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        run(args)
    except JeevesError as e:
        logger.debug(f"{type(e).__name__}: {e}", exc_info=True)
        print(e)
        return e.exit_code
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
