import logging
from collections.abc import Callable, Iterable
from functools import partial

import structlog
import ujson
from structlog.processors import JSONRenderer

from silverpop.settings import Settings


# paramiko logs every SSH packet exchange at DEBUG
THIRD_PARTY_LOG_LEVELS = {
    "paramiko": logging.WARNING,
    "niquests": logging.WARNING,
    "urllib3": logging.ERROR,
}


def setup_logger(log_level: int, console_render: bool) -> None:
    shared_processors: list[structlog.typing.Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            },
        ),
    ]

    if not console_render:
        shared_processors.append(structlog.processors.dict_tracebacks)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        build_formatter(shared_processors, get_logs_renderer(console_render=console_render)),
    )
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name, level in THIRD_PARTY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def setup_logger_from_settings(settings: Settings) -> None:
    log_level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    setup_logger(log_level=log_level, console_render=settings.debug)


def build_formatter(
    shared_processors: Iterable[structlog.typing.Processor],
    logs_render: Callable[..., str] | JSONRenderer,
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(shared_processors),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            logs_render,
        ],
    )


def get_logs_renderer(console_render: bool) -> Callable[..., str] | JSONRenderer:
    if not console_render:
        return structlog.processors.JSONRenderer(serializer=partial(ujson.dumps, ensure_ascii=False))

    console_renderer = structlog.dev.ConsoleRenderer(colors=True)

    def render_console(logger: structlog.typing.WrappedLogger, name: str, event_dict: structlog.typing.EventDict) -> str:
        if isinstance(event_dict.get("exception"), list):
            event_dict["exception"] = "".join(event_dict["exception"])
        return console_renderer(logger, name, event_dict)

    return render_console
