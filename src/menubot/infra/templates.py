"""Carga dos templates HTML das páginas de retorno do gateway."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)

from menubot.errors import TemplateLoadError
from menubot.observability.logging import get_logger

logger = get_logger(__name__)

RETURN_TEMPLATE = "payment_return.html"
CANCEL_TEMPLATE = "payment_canceled.html"


@dataclass(frozen=True, slots=True)
class PageTemplates:
    """Templates já compilados; parse acontece uma vez, no startup."""

    return_page: Template
    cancel_page: Template


def build_template_environment(templates_dir: Path) -> Environment:
    """Environment Jinja2 com autoescape para HTML."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )


def load_page_templates(templates_dir: Path) -> PageTemplates:
    """Compila os dois templates obrigatórios.

    Raises:
        TemplateLoadError: arquivo ausente ou com erro de sintaxe
    """
    env = build_template_environment(templates_dir)
    try:
        templates = PageTemplates(
            return_page=env.get_template(RETURN_TEMPLATE),
            cancel_page=env.get_template(CANCEL_TEMPLATE),
        )
    except TemplateNotFound as exc:
        raise TemplateLoadError(f"Template not found in {templates_dir}: {exc.name}") from exc
    except TemplateSyntaxError as exc:
        raise TemplateLoadError(
            f"Template syntax error in {exc.name or exc.filename} line {exc.lineno}: {exc.message}"
        ) from exc

    logger.info("templates_loaded", extra={"templates_dir": str(templates_dir)})
    return templates
