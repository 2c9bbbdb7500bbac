"""Jinja2 template rendering for HTML responses.

Templates are registered under their path relative to the views directory,
without the file suffix: ``views/home/index.html`` becomes ``home/index``.
Lookups accept the name with or without one of the configured suffixes.

A layout is an ordinary template that receives the same data as the page
plus ``content``, the already rendered page as safe markup::

    <html><body>{{ content }}</body></html>
"""

from __future__ import annotations

import glob
import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from jinja2 import DictLoader, Environment, StrictUndefined, Template, TemplateError, Undefined
from markupsafe import Markup

from respond.constants import DEFAULT_DELIMS, DEFAULT_TPL_SUFFIXES
from respond.errors import NotInitializedError, TemplateRenderError, TemplateSetupError
from respond.sinks import ResponseSink

logger = logging.getLogger(__name__)


class Renderer:
    """Load, compile and render templates from a views directory."""

    def __init__(
        self,
        views_dir: str = '',
        suffixes: Sequence[str] = DEFAULT_TPL_SUFFIXES,
        delims: Sequence[str] = DEFAULT_DELIMS,
        layout: Optional[str] = None,
        func_map: Optional[Mapping[str, Callable[..., Any]]] = None,
        debug: bool = False,
        encoding: str = 'utf-8',
    ):
        self.views_dir = views_dir
        self.suffixes = tuple(s.lstrip('.') for s in suffixes)
        self.delims = tuple(delims)
        self.layout = layout
        self.func_map = dict(func_map or {})
        self.debug = debug
        self.encoding = encoding
        self.initialized = False
        self._sources: Dict[str, str] = {}
        self._env: Optional[Environment] = None

    # ------------------------------------------------------------------
    # setup
    # ------------------------------------------------------------------

    def initialize(self) -> "Renderer":
        """Build the environment and load the views directory.

        Raises:
            TemplateSetupError: If the views directory is missing or a
                template does not compile
        """
        if self.initialized:
            return self

        left, right = self.delims
        env = Environment(
            loader=DictLoader(self._sources),
            autoescape=True,
            variable_start_string=left,
            variable_end_string=right,
            undefined=StrictUndefined if self.debug else Undefined,
        )
        env.globals.update(self.func_map)
        env.filters.update(self.func_map)
        self._env = env

        if self.views_dir:
            if not os.path.isdir(self.views_dir):
                raise TemplateSetupError(f"Views directory not found: {self.views_dir}")
            self._load_directory(self.views_dir)

        for name in list(self._sources):
            self._compile(name)

        self.initialized = True
        logger.info("Template renderer ready with %d template(s)", len(self._sources))
        if self.debug:
            logger.info("Loaded templates: %s", ", ".join(self.template_names()))
        return self

    def load_glob(self, pattern: str) -> None:
        """Load every file matching *pattern* (``views/**/*`` recurses)."""
        paths = [p for p in sorted(glob.glob(pattern, recursive=True)) if os.path.isfile(p)]
        self.load_files(*paths)

    def load_files(self, *paths: str) -> None:
        """Load the given template files."""
        for path in paths:
            try:
                with open(path, encoding='utf-8') as handle:
                    source = handle.read()
            except OSError as exc:
                raise TemplateSetupError(f"Cannot read template {path}: {exc}") from exc
            self.load_string(self._name_for_path(path), source)

    def load_string(self, name: str, source: str) -> None:
        """Register *source* as template *name*."""
        self._sources[name] = source
        logger.debug("Registered template %s", name)
        if self._env is not None:
            self._compile(name)

    def template_names(self) -> list[str]:
        return sorted(self._sources)

    def has_template(self, name: str) -> bool:
        return self._lookup(name) is not None

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------

    def render(self, sink: ResponseSink, name: str, data: Any = None, *layout: str) -> None:
        """Render template *name* and write it to *sink*.

        Args:
            sink: Response sink receiving the rendered bytes
            name: Template name, with or without suffix
            data: Template data; mapping keys are also exposed as variables
            layout: Optional layout override; an empty string disables the layout

        Raises:
            TemplateRenderError: If a template is unknown or fails to render
        """
        body = self.render_page(name, data, *layout)
        # HTML can carry any character as a reference whatever the charset.
        sink.write(body.encode(self.encoding, 'xmlcharrefreplace'))

    def render_page(self, name: str, data: Any = None, *layout: str) -> str:
        layout_name = layout[0] if layout else self.layout
        context = _context(data)
        content = self._render(self._template(name), context)

        if not layout_name:
            return content

        layout_context = dict(context)
        layout_context['content'] = Markup(content)
        return self._render(self._template(layout_name), layout_context)

    def partial(self, name: str, data: Any = None) -> str:
        """Render template *name* without any layout."""
        return self.execute(self._template(name), data)

    def compile_string(self, source: str) -> Template:
        """Compile an inline template with this renderer's settings."""
        env = self._environment()
        try:
            return env.from_string(source)
        except TemplateError as exc:
            raise TemplateRenderError(f"Cannot parse inline template: {exc}") from exc

    def render_string(self, source: str, data: Any = None) -> str:
        return self.execute(self.compile_string(source), data)

    def execute(self, template: Template, data: Any = None) -> str:
        """Render a compiled template with *data*."""
        return self._render(template, _context(data))

    def _render(self, template: Template, context: Mapping[str, Any]) -> str:
        try:
            return template.render(context)
        except TemplateError as exc:
            name = template.name or '<string>'
            raise TemplateRenderError(f"Cannot render template {name}: {exc}") from exc

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _environment(self) -> Environment:
        if self._env is None:
            raise NotInitializedError("Template renderer is not initialized")
        return self._env

    def _template(self, name: str) -> Template:
        resolved = self._lookup(name)
        if resolved is None:
            raise TemplateRenderError(f"Template not found: {name}")
        try:
            return self._environment().get_template(resolved)
        except TemplateError as exc:
            raise TemplateRenderError(f"Cannot load template {name}: {exc}") from exc

    def _lookup(self, name: str) -> Optional[str]:
        if name in self._sources:
            return name
        for suffix in self.suffixes:
            ending = f".{suffix}"
            if name.endswith(ending) and name[: -len(ending)] in self._sources:
                return name[: -len(ending)]
        return None

    def _compile(self, name: str) -> None:
        try:
            self._environment().get_template(name)
        except TemplateError as exc:
            raise TemplateSetupError(f"Template {name} does not compile: {exc}") from exc

    def _load_directory(self, views_dir: str) -> None:
        for root, _dirs, files in os.walk(views_dir):
            for filename in sorted(files):
                if self._suffix_of(filename) is None:
                    continue
                self.load_files(os.path.join(root, filename))

    def _name_for_path(self, path: str) -> str:
        if self.views_dir:
            relative = os.path.relpath(path, self.views_dir)
            if not relative.startswith(os.pardir):
                path = relative
            else:
                path = os.path.basename(path)
        else:
            path = os.path.basename(path)

        name = path.replace(os.sep, '/')
        suffix = self._suffix_of(name)
        if suffix is not None:
            name = name[: -len(suffix) - 1]
        return name

    def _suffix_of(self, filename: str) -> Optional[str]:
        for suffix in self.suffixes:
            if filename.endswith(f".{suffix}"):
                return suffix
        return None


def _context(data: Any) -> Dict[str, Any]:
    context: Dict[str, Any] = {'data': data}
    if isinstance(data, Mapping):
        context.update(data)
    return context


__all__ = ["Renderer"]
